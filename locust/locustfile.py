"""
Load profile for the dashboard: weighted mix of screen loads, searches and
cache status checks, read from endpoints.yml.

    locust -f locust/locustfile.py --host http://localhost:8080
"""
import os
import random
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from locust import HttpUser, between, tag, task
import yaml  # type: ignore

env_path = Path(__file__).with_name('.env')
if env_path.exists():
    load_dotenv(env_path)

API_PREFIX = os.getenv("API_PREFIX", "/api/v1")

WAIT_MIN = float(os.getenv("LOCUST_WAIT_MIN", 0.5))
WAIT_MAX = float(os.getenv("LOCUST_WAIT_MAX", 2.0))

ENDPOINTS_FILE = os.getenv("ENDPOINTS_FILE", "endpoints.yml")

# Queries a user would type into the search box, hits and misses
SEARCH_TERMS = [
    "Motor Speed", "battery", "temp", "error code", "dbg accel", "time stamp reports", "flux",
]


def load_endpoints() -> List[Dict[str, Any]]:
    p = Path(__file__).with_name(ENDPOINTS_FILE)
    if not p.exists():
        return []
    data = yaml.safe_load(p.read_text())
    if not isinstance(data, list):
        return []
    for ep in data:
        ep.setdefault('method', 'GET')
        ep.setdefault('weight', 1)
        ep.setdefault('expect', [200])
    return data


def expand_path(path: str) -> str:
    return path.replace('{api}', API_PREFIX).replace('{search_term}', random.choice(SEARCH_TERMS))


class DashboardUser(HttpUser):
    wait_time = between(WAIT_MIN, WAIT_MAX)
    endpoints: List[Dict[str, Any]] = []
    weighted_indices: List[int] = []

    @classmethod
    def reload_config(cls):
        cls.endpoints = load_endpoints()
        cls.weighted_indices = []
        for idx, ep in enumerate(cls.endpoints):
            cls.weighted_indices.extend([idx] * int(ep['weight']))

    def on_start(self):
        if not type(self).endpoints:  # once per worker
            type(self).reload_config()

    @tag("mixed")
    @task(5)
    def hit_endpoint(self):
        if not self.weighted_indices:
            return
        ep = self.endpoints[random.choice(self.weighted_indices)]
        path = expand_path(ep['path'])
        name = ep.get('name', ep['path'])

        with self.client.request(
            ep['method'].upper(), path, name=name, allow_redirects=False, catch_response=True
        ) as r:
            if r.status_code not in ep['expect']:
                r.failure(f"{r.status_code} for {path}")
            else:
                r.success()

    @tag("live")
    @task(1)
    def live_status(self):
        with self.client.get(f"{API_PREFIX}/live-status", catch_response=True) as r:
            if r.status_code != 200:
                r.failure(f"Live status failed: {r.status_code}")
            elif r.json().get("data") is None:
                r.failure("Live status returned no snapshot")
