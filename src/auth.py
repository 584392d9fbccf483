from typing import Optional

from fastapi import Depends, Request

from src.errors import Unauthenticated
from src.providers import FirebaseTokenVerifier
from src.schemas import CallerContext

token_verifier = FirebaseTokenVerifier()


def get_token_verifier() -> FirebaseTokenVerifier:
    return token_verifier


async def get_caller(
    request: Request,
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> Optional[CallerContext]:
    """
    Resolve the caller from the Authorization header.
    No header means no caller; a present but unusable token is rejected.
    """
    header = request.headers.get("Authorization")
    if not header:
        return None

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated("Malformed Authorization header.")

    return await verifier.verify(token.strip())
