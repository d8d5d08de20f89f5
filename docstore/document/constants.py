# Fields maintained by the data provider
ID = "_id"
CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"

RESTRICTED_FIELDS = (ID, CREATED_AT, UPDATED_AT)
""" Generated and maintained by the data provider, so clients may not send them. """

# Key used to return lists
RESULTS = "results"

# Query parameter names
WHERE = "where"
AGGREGATE = "aggregate"
SORT = "sort"
LIMIT = "limit"
SKIP = "skip"

FILE_BUCKET = "fs"
""" GridFS bucket name for file blobs. """
