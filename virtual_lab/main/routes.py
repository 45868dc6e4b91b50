from flask import render_template, Blueprint

from virtual_lab.labs.utils import _published_experiments

main = Blueprint('main', __name__)


@main.route("/")
@main.route("/home")
def home():
    featured = [e for e in _published_experiments() if e.featured]
    return render_template('home.html', featured=featured)
