import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-change-me')
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI',
        os.environ.get('DATABASE_URL', 'sqlite:///virtual_lab.db'),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Lifetime of identity-provider bearer tokens, in seconds
    AUTH_TOKEN_MAX_AGE = int(os.environ.get('AUTH_TOKEN_MAX_AGE', 3600))
    SIGN_IN_URL = os.environ.get('SIGN_IN_URL')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
