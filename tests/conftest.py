import gzip
import io
import tarfile
import zipfile
from typing import Dict

import pytest


def build_zip(entries: Dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as zip_ref:
        for path, content in entries.items():
            zip_ref.writestr(path, content)
    return buffer.getvalue()


def build_tar_gz(entries: Dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode='w:') as tf:
        for path, content in entries.items():
            info = tarfile.TarInfo(path)
            info.size = len(content)
            tf.addfile(info, io.BytesIO(content))
    return gzip.compress(buffer.getvalue())


def activity_xml(module: str, name: str, intro: str = '', introformat: str = '', extra: str = '') -> bytes:
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<activity id="1" moduleid="1" modulename="{module}" contextid="10">
  <{module} id="1">
    <name>{name}</name>
    <intro>{intro}</intro>
    <introformat>{introformat}</introformat>
    {extra}
  </{module}>
</activity>'''.encode('utf-8')


def inforef_xml(*file_ids: int) -> bytes:
    files = ''.join(f'<file><id>{file_id}</id></file>' for file_id in file_ids)
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<inforef>
  <fileref>{files}</fileref>
</inforef>'''.encode('utf-8')


def files_xml(*records) -> bytes:
    """records: (id, contenthash, filename)"""
    body = ''.join(
        f'''<file id="{file_id}">
    <contenthash>{contenthash}</contenthash>
    <contextid>10</contextid>
    <component>mod_resource</component>
    <filearea>content</filearea>
    <filepath>/</filepath>
    <filename>{filename}</filename>
  </file>'''
        for file_id, contenthash, filename in records
    )
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<files>{body}</files>'.encode('utf-8')


def section_xml(section_id: int, number: int, name: str, sequence: str) -> bytes:
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<section id="{section_id}">
  <number>{number}</number>
  <name>{name}</name>
  <summary></summary>
  <sequence>{sequence}</sequence>
</section>'''.encode('utf-8')


SAMPLE_ENTRIES = {
    'moodle_backup.xml': b'<moodle_backup/>',
    'files.xml': files_xml(
        (10, 'aa10', 'a.png'),
        (11, 'bb11', 'b.png'),
        (12, 'cc12', 'enunciado.pdf'),
        (13, 'dd13', '.'),
    ),
    'files/aa/aa10': b'PNG-A',
    'files/bb/bb11': b'PNG-B',
    'files/cc/cc12': b'%PDF-1.4',
    'activities/assign_1/assign.xml': activity_xml(
        'assign', 'Entrega', extra='<duedate>1700000000</duedate>'
    ),
    'activities/assign_1/inforef.xml': inforef_xml(12, 555),
    'activities/label_2/label.xml': activity_xml(
        'label', 'Bienvenida', intro='&lt;p&gt;Hola&lt;/p&gt;', introformat='1'
    ),
    'activities/label_2/inforef.xml': inforef_xml(),
    'activities/resource_3/resource.xml': activity_xml(
        'resource', 'Imagenes', intro='Ver imagenes'
    ),
    'activities/resource_3/inforef.xml': inforef_xml(10, 11),
    'activities/forum_4/forum.xml': activity_xml('forum', 'Avisos'),
    'activities/forum_4/inforef.xml': inforef_xml(),
    'sections/section_100/section.xml': section_xml(100, 0, 'General', '2,4'),
    'sections/section_100/inforef.xml': inforef_xml(),
    'sections/section_101/section.xml': section_xml(101, 1, 'Tema 1', '1,3'),
}


@pytest.fixture
def sample_entries() -> Dict[str, bytes]:
    return dict(SAMPLE_ENTRIES)


@pytest.fixture
def sample_zip(sample_entries) -> bytes:
    return build_zip(sample_entries)


@pytest.fixture
def sample_tar_gz(sample_entries) -> bytes:
    return build_tar_gz(sample_entries)


@pytest.fixture
def make_zip():
    return build_zip


@pytest.fixture
def make_tar_gz():
    return build_tar_gz


@pytest.fixture
def xml_factory():
    """Descriptor builders for tests that assemble their own backups"""
    class Factory:
        activity = staticmethod(activity_xml)
        inforef = staticmethod(inforef_xml)
        files = staticmethod(files_xml)
        section = staticmethod(section_xml)
    return Factory
