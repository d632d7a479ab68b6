# app/schemas/auth/credential_schemas.py

from pydantic import BaseModel


class Credential(BaseModel):
    id_account: int
    id_user: int

    class Config:
        frozen = True
