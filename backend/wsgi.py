"""WSGI entrypoint: ``gunicorn -c gunicorn.conf.py`` or ``flask --app wsgi run``."""

from catetin import create_app

app = create_app()
