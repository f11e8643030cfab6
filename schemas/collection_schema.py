from pydantic import BaseModel, Field


class CollectionImage(BaseModel):
    id: str
    url: str
    alt: str
    caption: str | None = None


class Collection(BaseModel):
    id: str
    title: str
    slug: str
    short_description: str
    description: str
    hero_image: str
    images: list[CollectionImage] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    price_range: str
    delivery_time: str
    materials: list[str] = Field(default_factory=list)
    customizable: bool = True
    popular: bool = False


class MessagingLinkResponse(BaseModel):
    url: str
    message: str
