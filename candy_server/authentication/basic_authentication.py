import argparse
import asyncio
import hashlib
import logging
import secrets

from fastapi import HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import async_sessionmaker

from candy_server.crud import CreateData, ReadData
from candy_server.db import Session, create_tables, engine
from candy_server.load_secrets import pepper_data
from candy_server.models.schema_models import UserSchema

security = HTTPBasic()
optional_security = HTTPBasic(auto_error=False)


def hash_password(password: str, salt: str, pepper: str = pepper_data) -> str:
    return hashlib.sha256((password + salt + pepper).encode()).hexdigest()


class BasicAuthentication:
    """Identity provider: HTTP Basic credentials checked against salted, peppered hashes.

    The authenticated username is the player identity (authority).
    """

    def __init__(self, Session: async_sessionmaker = Session):
        self.Session = Session

    async def verify(self, credentials: HTTPBasicCredentials) -> UserSchema:
        """Check the credentials against the users table

        Args:
            credentials (HTTPBasicCredentials): username and password from the request

        Raises:
            HTTPException: The user is not found in the database
            HTTPException: The password is incorrect

        Returns:
            UserSchema: The authenticated user
        """
        async with self.Session() as session:
            user_data = await ReadData.read_user_data(credentials.username, session)
        if user_data is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username",
                headers={"WWW-Authenticate": "Basic"},
            )

        hashed_password = hash_password(credentials.password, user_data.salt)
        if not secrets.compare_digest(hashed_password, user_data.hash_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid password",
                headers={"WWW-Authenticate": "Basic"},
            )
        return user_data

    async def store_user_data(self, user_name: str, password: str) -> UserSchema:
        salt = secrets.token_hex(8)
        user = UserSchema(username=user_name, hash_password=hash_password(password, salt), salt=salt)
        async with self.Session() as session:
            async with session.begin():
                if not await CreateData.create_user_data(user, session):
                    raise RuntimeError("Failed to create user data")
        logging.info(f"User created: {user_name}")
        return user


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Register a player for Basic Authentication")
    parser.add_argument("--username", type=str, help="Username", required=True)
    parser.add_argument("--password", type=str, help="Password", required=True)
    return parser


async def main(user_name: str, password: str):
    await create_tables(engine)
    basic_auth = BasicAuthentication()
    user_data = await basic_auth.store_user_data(user_name, password)
    print(user_data.username, user_data.hash_password, user_data.salt)


if __name__ == "__main__":
    parser = get_parser()
    args = parser.parse_args()
    asyncio.run(main(args.username, args.password))
