"""Sequence counter model."""

from sqlmodel import Field, SQLModel


class SequenceCounter(SQLModel, table=True):
    """Per-(project, kind) counter behind human-readable numbers like BUG-42.

    Only ever touched through SequenceRepository.allocate.
    """

    __tablename__ = "counters"

    # Natural key: "{project_id}_{kind}"
    id: str = Field(primary_key=True, max_length=100)
    seq: int = Field(default=0)

    @staticmethod
    def make_key(project_id: object, kind: str) -> str:
        return f"{project_id}_{kind}"
