"""Run a quick in-process request against the app.

Starts the application with FastAPI's TestClient (so the store is
initialised by the lifespan hook) and prints the `/health` response and
the number of catalog topics.
"""

import sys
import os

# Ensure backend folder is on sys.path so `juslearn` can be imported from a checkout
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient
from juslearn.main import app


def run():
    with TestClient(app) as client:
        resp = client.get('/health')
        print('STATUS:', resp.status_code)
        print('JSON:', resp.json())
        modules = client.get('/api/modules')
        print('TOPICS:', len(modules.json()) if modules.status_code == 200 else modules.text)


if __name__ == '__main__':
    run()
