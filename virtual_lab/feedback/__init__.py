from flask import Blueprint

feedback = Blueprint('feedback', __name__)

from virtual_lab.feedback import routes  # noqa: E402,F401
