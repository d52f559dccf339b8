from pydantic import BaseModel, ConfigDict


class SourceDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    url: str
    content: str
