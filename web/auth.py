"""HTTP Basic Auth guarding every per-user command route and the token routes.

The API books seats with the shared platform token, so it stays closed until
DASHBOARD_PASS is configured.
"""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from config import DASHBOARD_USER, DASHBOARD_PASS

security = HTTPBasic()


def require_auth(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """Check the operator credentials. Returns the username.

    An empty DASHBOARD_PASS rejects everyone rather than accepting a blank password.
    """
    correct_user = secrets.compare_digest(credentials.username.encode(), DASHBOARD_USER.encode())
    correct_pass = secrets.compare_digest(credentials.password.encode(), DASHBOARD_PASS.encode())
    if not (DASHBOARD_PASS and correct_user and correct_pass):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
