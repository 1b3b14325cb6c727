"""
Local smoke check: boots the app on the in-memory store (seeded from
db_seed.json), reports one issue and prints what the admin would see.
"""

import os

os.environ.setdefault("USE_MOCK_DB", "true")
os.environ.setdefault("AI_ENABLED", "false")

from fastapi.testclient import TestClient
from civix.main import app

SAMPLE_ISSUE = {
    "title": "Street light not working",
    "description": "Light out for 3 days near the bus stop",
    "category": "other",
    "urgency": "high",
    "location": {"latitude": 18.5204, "longitude": 73.8567, "address": "FC Road, Pune"},
}

with TestClient(app) as client:
    print('HEALTH:')
    print(client.get('/health').json())
    print(client.get('/health/db').json())

    print('\nREPORT ISSUE:')
    resp = client.post('/issues', json=SAMPLE_ISSUE)
    print(resp.status_code)
    dispatch = resp.json()['dispatch']
    if dispatch:
        print(f"category={dispatch['category']} method={dispatch['method']} "
              f"confidence={dispatch['confidence']} outcome={dispatch['outcome']['kind']}")

    print('\nADMIN INBOX:')
    for notification in client.get('/admin/notifications').json()['notifications']:
        print(f"[{notification['priority']}] {notification['type']}: {notification['message']}")
    print(client.get('/admin/notifications/counts').json())
