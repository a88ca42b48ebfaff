"""User SQLAlchemy model."""

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from users_api.database import Base


class User(Base):
    """A stored user record."""

    __tablename__ = "users"

    # SQLite only autoincrements a plain INTEGER primary key.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    birthday: Mapped[str] = mapped_column(String, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.id}>"
