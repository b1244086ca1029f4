from flask import Flask, render_template, request, jsonify, send_file
import markdown
from .core import DEFAULT_OUTPUT, create_markdown_document, markdown_to_files
import io
import logging
import os
import zipfile
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

app = Flask(__name__)
extracted_buffers: Dict[str, bytes] = {}

def catalog_root() -> Path:
    return Path(app.config.get("CATALOG_ROOT") or os.getcwd())

def render_catalog_html(markdown_text: str) -> str:
    return markdown.markdown(markdown_text, extensions=["fenced_code"])

@app.route('/')
def index():
    markdown_content, count = create_markdown_document(catalog_root())
    return render_template(
        'index.html',
        root=str(catalog_root()),
        count=count,
        filename=DEFAULT_OUTPUT,
        catalog_html=render_catalog_html(markdown_content),
    )

@app.route('/process', methods=['POST'])
def process():
    try:
        markdown_content, _ = create_markdown_document(catalog_root())
    except OSError as e:
        logger.exception("Catalog generation failed")
        return jsonify({'error': f"Error reading source tree: {e}"}), 500
    try:
        files = markdown_to_files(markdown_content)
    except ValueError:
        files = []  # empty catalog
    return jsonify({'markdown': markdown_content, 'filename': DEFAULT_OUTPUT, 'files': files})

@app.route('/download')
def download():
    markdown_content, _ = create_markdown_document(catalog_root())
    buffer = io.BytesIO(markdown_content.encode('utf-8'))
    return send_file(buffer, as_attachment=True, download_name=DEFAULT_OUTPUT, mimetype='text/markdown')

@app.route('/reverse', methods=['POST'])
def reverse():
    upload = request.files.get('markdown_file')
    markdown_text = (
        upload.read().decode('utf-8', errors='replace') if upload else
        request.form.get('markdown_text', '')
    )
    if not markdown_text.strip():
        return jsonify({'error': 'No Markdown data provided', 'files': []}), 400

    try:
        files = markdown_to_files(markdown_text)
    except ValueError as e:
        return jsonify({'error': str(e), 'files': []}), 400

    extracted_buffers.clear()
    extracted_buffers.update({f['filepath']: f['content'].encode('utf-8') for f in files})
    return jsonify({'files': files, 'error': None})

@app.route('/download_extracted', methods=['POST'])
def download_extracted():
    if not extracted_buffers:
        return jsonify({'error': 'No files available'}), 400
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zip_file:
        for filepath, content in extracted_buffers.items():
            zip_file.writestr(filepath, content)
    buffer.seek(0)
    return send_file(buffer, as_attachment=True, download_name="extracted_files.zip", mimetype='application/zip')

def run_demo(root: str = ".", host: str = "0.0.0.0", port: int = 7860, debug: bool = True) -> None:
    app.config["CATALOG_ROOT"] = str(Path(root).absolute())
    app.run(host=host, port=port, debug=debug)

if __name__ == "__main__":
    run_demo()
