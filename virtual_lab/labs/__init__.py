from flask import Blueprint

labs = Blueprint('labs', __name__)

from virtual_lab.labs import routes  # noqa: E402,F401
