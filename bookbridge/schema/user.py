from bookbridge.schema.base import Record


class UserProfile(Record):
    id: str
    name: str
    email: str
    phone: str = ""
    address: str = ""
    avatar: str = ""
