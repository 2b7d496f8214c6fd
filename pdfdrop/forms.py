"""
Upload page form (no-script fallback)
"""
from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField, FileRequired
from wtforms import SubmitField
from wtforms.validators import ValidationError

from pdfdrop.services.pdf_service import is_pdf_mimetype


class PdfUploadForm(FlaskForm):
    file = FileField('PDF file', validators=[
        FileRequired('Please choose a PDF file'),
        FileAllowed(['pdf'], 'Only PDF files are accepted'),
    ])
    submit = SubmitField('Upload')

    def validate_file(self, field):
        if field.data and not is_pdf_mimetype(field.data.mimetype):
            raise ValidationError('Only PDF files are accepted')
