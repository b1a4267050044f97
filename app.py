"""
Flask Web Application for the Moodle Backup to ZIP Converter
Simple upload/convert/download interface
"""

import io
import os
from pathlib import Path
from flask import Flask, render_template, request, send_file, jsonify
from werkzeug.utils import secure_filename

from mbz_unpacker.converter import MbzToZipConverter
from mbz_unpacker.errors import MbzError

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 200 * 1024 * 1024  # 200MB max backup size


@app.route('/')
def index():
    """Main page"""
    return render_template('index.html')


@app.route('/convert', methods=['POST'])
def convert():
    """Convert an uploaded backup and send the ZIP back"""
    if 'file' not in request.files:
        return jsonify({'error': 'No file uploaded'}), 400

    file = request.files['file']
    if file.filename == '':
        return jsonify({'error': 'No file selected'}), 400

    if not file.filename.lower().endswith(('.mbz', '.zip')):
        return jsonify({'error': 'File must be .mbz or .zip'}), 400

    filename = secure_filename(file.filename)
    download_name = (Path(filename).stem or 'course') + '_browsable.zip'

    # Everything stays in memory; a failed conversion sends nothing back
    try:
        converter = MbzToZipConverter(verbose=False)
        output = converter.convert(file.read())
    except MbzError as e:
        return jsonify({'error': str(e)}), 422

    return send_file(
        io.BytesIO(output),
        mimetype='application/zip',
        as_attachment=True,
        download_name=download_name
    )


@app.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({'status': 'healthy'})


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=False)
