# File: kioskvote_app/modules/kiosk/__init__.py
from flask import Blueprint

kiosk_bp = Blueprint(
    'kiosk', __name__,
    template_folder='templates',
    static_folder='static',
    static_url_path='/kiosk/static',
)

from . import routes  # noqa: E402,F401
