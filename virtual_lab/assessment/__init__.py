from flask import Blueprint

assessment = Blueprint('assessment', __name__)

from virtual_lab.assessment import routes  # noqa: E402,F401
