import logging
import sys

from flask import Flask


app = Flask('subhost', static_folder=None)
app.config.from_envvar('SUBHOST_SETTINGS')
app.logger.addHandler(logging.StreamHandler(sys.stderr))
app.logger.setLevel(logging.DEBUG)


@app.after_request
def add_cors_headers(response):
    # Uploaded sites and the upload API are both meant to be reachable from
    # any origin.
    response.headers['Access-Control-Allow-Origin'] = app.config.get('CORS_ALLOW_ORIGIN', '*')
    return response
