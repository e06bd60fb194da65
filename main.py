"""WSGI entrypoint for the recipe box application.

The Flask development server is not started from this module so that
deployments run it under Gunicorn (``gunicorn main:app``). Local development
can still use ``flask --app main run`` which imports the ``app`` object
defined below.
"""

from recipebox import create_app

app = create_app()


__all__ = ["app"]
