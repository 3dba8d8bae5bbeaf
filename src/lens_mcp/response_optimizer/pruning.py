"""Field names dropped by the structure optimizer.

Groups are kept separate so each category can be inspected and tested on its
own; ``PRUNED_FIELDS`` is their union.
"""

INTERNAL_FIELDS = frozenset(
    {
        "__v",
        "_id",
        "id_str",
        "nodeId",
        "cursor",
        "version",
        "hash",
        "blockHash",
        "blockTimestamp",
        "logIndex",
        "removed",
    }
)

LINK_FIELDS = frozenset(
    {
        "snapshotUrl",
        "contentUri",
        "rawUri",
        "optimized",
        "transformedContent",
        "animatedUrl",
        "uri",
        "url",
        "urls",
        "link",
        "links",
        "href",
        "src",
        "thumbnail",
        "preview",
        "fullUrl",
        "originalUrl",
        "smallUrl",
        "mediumUrl",
        "largeUrl",
    }
)

CHAIN_FIELDS = frozenset(
    {
        "txHash",
        "blockNumber",
        "transactionIndex",
        "chainId",
        "contractAddress",
        "gasUsed",
        "gasPrice",
        "effectiveGasPrice",
        "cumulativeGasUsed",
    }
)

DISPLAY_FIELDS = frozenset(
    {
        "cached",
        "processed",
        "normalized",
        "formatted",
        "rendered",
        "displayUrls",
        "theme",
        "style",
        "css",
        "class",
        "className",
        "color",
        "background",
    }
)

METADATA_BLOB_FIELDS = frozenset(
    {
        "rawMetadata",
        "encryptedMetadata",
        "signature",
        "proof",
        "nonce",
        "collectibleMetadata",
        "lensMetadata",
        "internalMetadata",
        "appMetadata",
        "publicationMetadata",
        "profileMetadata",
    }
)

IMPLEMENTATION_FIELDS = frozenset(
    {
        "operations",
        "momoka",
        "dataAvailabilityProofs",
        "dataAvailability",
        "protocol",
        "implementation",
        "factory",
        "proxy",
        "permissions",
        "roles",
        "capabilities",
        "features",
        "flags",
    }
)

MEDIA_FIELDS = frozenset(
    {
        "media",
        "attachments",
        "asset",
        "assets",
        "cover",
        "coverPicture",
        "picture",
        "image",
        "images",
        "video",
        "videos",
        "audio",
        "files",
        "documents",
        "gallery",
        "icon",
        "logo",
    }
)

NETWORK_FIELDS = frozenset(
    {
        "gateway",
        "gateways",
        "ipfsHash",
        "arweaveId",
        "ipfs",
        "arweave",
        "node",
        "nodes",
        "endpoint",
        "endpoints",
        "rpc",
        "ws",
    }
)

LENS_INTERNAL_FIELDS = frozenset(
    {
        "indexedAt",
        "publishedOn",
        "syncedAt",
        "lastActivityAt",
        "mirrorId",
        "collectNftAddress",
        "collectModule",
        "referenceModule",
        "operations",
        "actions",
        "rules",
    }
)

PAGINATION_FIELDS = frozenset(
    {
        "pageInfo",
        "edges",
        "connection",
        "connectionType",
        "hasNext",
        "hasPrev",
        "next",
        "prev",
        "first",
        "last",
        "count",
        "total",
    }
)

TYPE_TAG_FIELDS = frozenset(
    {
        "type",
        "kind",
        "__typename",
        "entityType",
        "objectType",
        "dataType",
    }
)

EMPTY_MARKER_FIELDS = frozenset({"null", "undefined", "empty", "void"})

TIMESTAMP_FIELDS = frozenset(
    {
        "timestamp",
        "createdAt",
        "updatedAt",
        "publishedAt",
        "modifiedAt",
        "editedAt",
    }
)

TELEMETRY_FIELDS = frozenset(
    {
        "counters",
        "metrics",
        "analytics",
        "tracking",
        "telemetry",
    }
)

PRUNED_FIELD_GROUPS: dict[str, frozenset[str]] = {
    "internal": INTERNAL_FIELDS,
    "links": LINK_FIELDS,
    "chain": CHAIN_FIELDS,
    "display": DISPLAY_FIELDS,
    "metadata_blobs": METADATA_BLOB_FIELDS,
    "implementation": IMPLEMENTATION_FIELDS,
    "media": MEDIA_FIELDS,
    "network": NETWORK_FIELDS,
    "lens_internal": LENS_INTERNAL_FIELDS,
    "pagination": PAGINATION_FIELDS,
    "type_tags": TYPE_TAG_FIELDS,
    "empty_markers": EMPTY_MARKER_FIELDS,
    "timestamps": TIMESTAMP_FIELDS,
    "telemetry": TELEMETRY_FIELDS,
}

PRUNED_FIELDS: frozenset[str] = frozenset().union(*PRUNED_FIELD_GROUPS.values())


def is_pruned_field(key: str) -> bool:
    """Check whether a key is dropped by the structure optimizer."""
    return key in PRUNED_FIELDS
