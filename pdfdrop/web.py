"""
Web Blueprint - the upload page
"""
from flask import Blueprint, current_app, render_template, url_for
from flask_wtf.csrf import CSRFError

from pdfdrop.forms import PdfUploadForm
from pdfdrop.services.pdf_service import format_file_size
from pdfdrop.services.storage_service import UploadError, store_upload

web_bp = Blueprint('web', __name__)


def page_config():
    """Settings handed to static/upload.js"""
    cfg = current_app.config
    return {
        "uploadUrl": url_for('api.upload'),
        "maxFileSize": cfg.get("MAX_FILE_SIZE"),
        "timeoutMs": int(cfg.get("CLIENT_TIMEOUT", 30)) * 1000,
    }


def render_page(form, result=None, error=None, status=200):
    max_size = current_app.config.get("MAX_FILE_SIZE")
    return render_template(
        'index.html',
        form=form,
        result=result,
        error=error,
        page_config=page_config(),
        max_size_label=format_file_size(max_size) if max_size else None,
        format_file_size=format_file_size,
    ), status


@web_bp.route('/', methods=['GET', 'POST'])
def index():
    form = PdfUploadForm()

    if form.validate_on_submit():
        upload = form.file.data
        try:
            stored = store_upload(upload.read(), upload.filename, current_app.config["UPLOAD_DIR"])
        except UploadError:
            current_app.logger.exception("Page form upload failed")
            return render_page(form, error="Failed to process file", status=500)
        current_app.logger.info("Stored %s via page form as %s", stored.original_name, stored.path)
        return render_page(form, result=stored.to_dict())

    if form.is_submitted():
        messages = [m for errs in form.errors.values() for m in errs]
        return render_page(form, error=messages[0] if messages else "Upload failed", status=400)

    return render_page(form)


@web_bp.errorhandler(CSRFError)
def csrf_error(e):
    current_app.logger.info("Page form rejected: %s", e.description)
    return render_page(PdfUploadForm(), error="The form expired, please try again", status=400)
