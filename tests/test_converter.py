"""
End-to-end tests for the conversion pipeline and the command line
"""

import io
import sys
import zipfile

import pytest

from mbz_unpacker.__main__ import main
from mbz_unpacker.converter import MbzToZipConverter, convert_mbz_to_zip
from mbz_unpacker.errors import MissingActivityError, UnsupportedFormatError

EXPECTED_ENTRIES = [
    ('1_Tema 1/0_Tarea_Entrega.pdf', b'%PDF-1.4'),
    ('1_Tema 1/1_Imagenes/1_a.png', b'PNG-A'),
    ('1_Tema 1/1_Imagenes/2_b.png', b'PNG-B'),
    ('1_Tema 1/1_Imagenes/Imagenes.txt', b'Ver imagenes'),
    ('2_General/0_Texto_Bienvenida.html', b'<p>Hola</p>'),
    ('2_General/1_Avisos.txt', b''),
]


def read_entries(data: bytes):
    with zipfile.ZipFile(io.BytesIO(data)) as zip_ref:
        return [
            (info.filename, zip_ref.read(info))
            for info in zip_ref.infolist()
            if not info.is_dir()
        ]


def test_convert_zip_backup(sample_zip):
    output = MbzToZipConverter().convert(sample_zip)
    assert read_entries(output) == EXPECTED_ENTRIES


def test_convert_tar_gz_backup(sample_tar_gz):
    output = MbzToZipConverter().convert(sample_tar_gz)
    assert read_entries(output) == EXPECTED_ENTRIES


def test_report(sample_tar_gz):
    converter = MbzToZipConverter()
    output = converter.convert(sample_tar_gz)
    assert converter.report == {
        'source_format': 'gzip',
        'entries': 16,
        'sections': 2,
        'activities': 4,
        'files': 3,
        'activities_by_type': {'assign': 1, 'label': 1, 'resource': 1, 'forum': 1},
        'pruned_file_refs': 1,
        'due_dates': [
            {'id': 1, 'name': 'Entrega', 'due_date': '2023-11-14T22:13:20+00:00'},
        ],
        'output_size': len(output),
    }


def test_missing_activity_fails_whole_conversion(sample_entries, make_zip, xml_factory):
    sample_entries['sections/section_101/section.xml'] = xml_factory.section(101, 1, 'Tema 1', '1,3,77')
    with pytest.raises(MissingActivityError):
        MbzToZipConverter().convert(make_zip(sample_entries))


def test_unsupported_input():
    with pytest.raises(UnsupportedFormatError):
        MbzToZipConverter().convert(b'plain text')


def test_verbose_output(sample_zip, capsys):
    MbzToZipConverter(verbose=True).convert(sample_zip)
    out = capsys.readouterr().out
    assert 'Step 1' in out
    assert 'Conversion Complete' in out
    assert 'Dropping 1 references' in out


def test_convert_mbz_to_zip_writes_output(sample_zip, tmp_path):
    source = tmp_path / 'backup.mbz'
    source.write_bytes(sample_zip)
    target = tmp_path / 'out' / 'course.zip'

    report = convert_mbz_to_zip(str(source), str(target), verbose=False)

    assert read_entries(target.read_bytes()) == EXPECTED_ENTRIES
    assert report['source_file'] == 'backup.mbz'
    assert report['output_file'] == str(target)


def test_convert_mbz_to_zip_missing_input(tmp_path):
    with pytest.raises(FileNotFoundError):
        convert_mbz_to_zip(str(tmp_path / 'nope.mbz'), str(tmp_path / 'out.zip'), verbose=False)


def test_cli_main(sample_tar_gz, tmp_path, monkeypatch, capsys):
    source = tmp_path / 'backup.mbz'
    source.write_bytes(sample_tar_gz)
    target = tmp_path / 'course.zip'
    monkeypatch.setattr(sys, 'argv', ['mbz-unpacker', str(source), str(target)])

    assert main() == 0
    assert target.exists()
    out = capsys.readouterr().out
    assert 'Activities: 4' in out
    assert 'Due 2023-11-14T22:13:20+00:00: Entrega' in out


def test_cli_main_reports_errors(tmp_path, monkeypatch, capsys):
    source = tmp_path / 'broken.mbz'
    source.write_bytes(b'garbage')
    monkeypatch.setattr(sys, 'argv', ['mbz-unpacker', str(source), str(tmp_path / 'out.zip')])

    assert main() == 1
    assert 'Conversion failed' in capsys.readouterr().err
    assert not (tmp_path / 'out.zip').exists()


def test_cli_main_quiet(sample_zip, tmp_path, monkeypatch, capsys):
    source = tmp_path / 'backup.mbz'
    source.write_bytes(sample_zip)
    target = tmp_path / 'course.zip'
    monkeypatch.setattr(sys, 'argv', ['mbz-unpacker', str(source), str(target), '--quiet'])

    assert main() == 0
    assert read_entries(target.read_bytes()) == EXPECTED_ENTRIES
    assert capsys.readouterr().out == ''


def test_cli_main_missing_input(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['mbz-unpacker', str(tmp_path / 'nope.mbz'), str(tmp_path / 'out.zip'), '-q'])

    assert main() == 1
    assert 'not found' in capsys.readouterr().err


def test_cli_main_corrupt_body_exits_cleanly(sample_tar_gz, tmp_path, monkeypatch, capsys):
    source = tmp_path / 'damaged.mbz'
    source.write_bytes(sample_tar_gz[:10] + b'\xff' * (len(sample_tar_gz) - 18) + sample_tar_gz[-8:])
    monkeypatch.setattr(sys, 'argv', ['mbz-unpacker', str(source), str(tmp_path / 'out.zip')])

    assert main() == 1
    assert 'Corrupt gzip stream' in capsys.readouterr().err
