from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

BaseModel = declarative_base()


class Base(BaseModel):
    __abstract__ = True

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)


class CreatedAt(BaseModel):
    """Insert-only timestamp. Rows carrying it are never updated."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.current_timestamp(),
        nullable=False,
    )
