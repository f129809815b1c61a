# File: kioskvote_app/modules/voting/__init__.py
from flask import Blueprint

voting_bp = Blueprint('voting', __name__)

from . import routes  # noqa: E402,F401
