"""Access to the Firestore document that holds the shared rota."""

from __future__ import annotations

import json
import os
from typing import Optional

from google.cloud import firestore
from google.oauth2 import service_account

PROJECT_ENV_VARS = ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT", "FIREBASE_PROJECT_ID")


def _project_from_env() -> Optional[str]:
    for var in PROJECT_ENV_VARS:
        if os.environ.get(var):
            return os.environ[var]
    return None


def open_client() -> firestore.Client:
    """
    Firestore client for the rota, configured from the environment.

    With a project id set, Application Default Credentials are used (Cloud Run).
    Without one, FIREBASE_SERVICE_ACCOUNT_JSON supplies both key and project.
    """
    project = _project_from_env()
    svc_json = os.environ.get("FIREBASE_SERVICE_ACCOUNT_JSON")
    if svc_json and not project:
        try:
            info = json.loads(svc_json)
        except json.JSONDecodeError as e:
            raise ValueError(f"FIREBASE_SERVICE_ACCOUNT_JSON is not valid JSON: {e}")
        creds = service_account.Credentials.from_service_account_info(info)
        return firestore.Client(project=info["project_id"], credentials=creds)
    return firestore.Client(project=project)


def schedule_document(
    collection: str = "rota",
    document: str = "shifts",
    client: Optional[firestore.Client] = None,
) -> firestore.DocumentReference:
    """
    Reference to the single document holding every shift override.

    Args:
        collection: Firestore collection name
        document: Document id inside `collection`
        client: Existing client; a new one is opened from the environment when None
    """
    if client is None:
        client = open_client()
    return client.collection(collection).document(document)
