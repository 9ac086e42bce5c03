from enum import Enum


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def from_content_type(cls, content_type: str | None) -> "MediaType":
        if content_type and content_type.startswith("video/"):
            return cls.VIDEO
        return cls.IMAGE
