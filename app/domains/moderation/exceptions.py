class ModerationError(Exception):
    """Base error of the moderation domain"""

    status_code = 400


class ContentNotFoundError(ModerationError):
    status_code = 404

    def __init__(self, content_type: str, content_id: str):
        self.content_type = content_type
        self.content_id = content_id
        super().__init__(f"{content_type} {content_id} not found")
