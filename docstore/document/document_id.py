from bson import ObjectId


class DocumentId(str):
	""" Used for a record's _id field and for file ids.
	Ids are stored as the hex string of an ObjectId rather than the ObjectId itself, so clients can address them in URLs. """
	def __new__(cls, _id: str | None = None):
		if not _id:
			_id = str(ObjectId())
		instance = super().__new__(cls, _id)
		return instance
