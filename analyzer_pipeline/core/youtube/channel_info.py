"""
Channel Information Domain Model
"""


class ChannelInfo:
    """
    Domain model representing a resolved YouTube channel.
    Represents a VALID channel state only.
    """

    def __init__(self, channel_id: str, title: str):
        self.channel_id = channel_id
        self.title = title

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/channel/{self.channel_id}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChannelInfo):
            return NotImplemented
        return self.channel_id == other.channel_id and self.title == other.title

    def __repr__(self) -> str:
        return f"ChannelInfo(title={self.title!r}, id={self.channel_id!r})"
