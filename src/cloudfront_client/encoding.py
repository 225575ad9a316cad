"""XML wire encoding for distribution configs.

Every list-typed field goes through the same adapter: the in-memory list is
projected to an :class:`EncodedCollection` and written as::

    <Parent><Quantity>N</Quantity><Items><Tag>v1</Tag>...</Items></Parent>

An empty list still writes ``<Quantity>0</Quantity>``; only ``Items`` is
left out.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Callable, Iterable, Optional, TypeVar

from cloudfront_client.types import (
    AllowedMethods,
    CacheBehavior,
    Cookies,
    CustomErrorResponse,
    DistributionConfig,
    EncodedCollection,
    ForwardedValues,
    GeoRestriction,
    Logging,
    Origin,
    TrustedSigners,
    ViewerCertificate,
)

T = TypeVar("T")

API_VERSION = "2014-11-06"
XML_NAMESPACE = f"http://cloudfront.amazonaws.com/doc/{API_VERSION}/"

ALIAS_TAG = "CNAME"
ORIGIN_TAG = "Origin"
CACHE_BEHAVIOR_TAG = "CacheBehavior"
CUSTOM_ERROR_RESPONSE_TAG = "CustomErrorResponse"
NAME_TAG = "Name"
ACCOUNT_NUMBER_TAG = "AWSAccountNumber"
LOCATION_TAG = "Location"
METHOD_TAG = "Method"

ItemWriter = Callable[[ET.Element, str, T], None]
ItemReader = Callable[[ET.Element], T]


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _text(parent: ET.Element, tag: str, value: str | int | bool) -> ET.Element:
    node = ET.SubElement(parent, tag)
    if isinstance(value, bool):
        node.text = "true" if value else "false"
    else:
        node.text = str(value)
    return node


def encode_collection(items: Iterable[T], tag: str) -> EncodedCollection[T]:
    """Project ``items`` into its wire shape without touching the source list."""
    return EncodedCollection(tag=tag, items=tuple(items))


def write_text_item(parent: ET.Element, tag: str, value: str) -> None:
    _text(parent, tag, value)


def read_text_item(element: ET.Element) -> str:
    return element.text or ""


def write_collection(
    parent: ET.Element,
    encoded: EncodedCollection[T],
    write_item: ItemWriter = write_text_item,
) -> None:
    _text(parent, "Quantity", encoded.quantity)
    if not encoded.items:
        return
    items = ET.SubElement(parent, "Items")
    for item in encoded.items:
        write_item(items, encoded.tag, item)


def decode_collection(
    element: ET.Element,
    tag: str,
    read_item: ItemReader = read_text_item,
) -> list:
    """Read a ``Quantity``/``Items`` pair back into an ordered list."""
    quantity_node = _child(element, "Quantity")
    if quantity_node is None:
        raise ValueError(f"Missing Quantity in <{_local_name(element.tag)}>")
    quantity = int(quantity_node.text or "0")

    items_node = _child(element, "Items")
    items = []
    if items_node is not None:
        items = [read_item(child) for child in items_node if _local_name(child.tag) == tag]

    if len(items) != quantity:
        raise ValueError(
            f"<{_local_name(element.tag)}> declares Quantity {quantity} but holds {len(items)} <{tag}> items",
        )
    return items


def _write_names(parent: ET.Element, tag: str, names: list[str]) -> None:
    write_collection(ET.SubElement(parent, tag), encode_collection(names, NAME_TAG))


def _write_cookies(parent: ET.Element, cookies: Cookies) -> None:
    node = ET.SubElement(parent, "Cookies")
    _text(node, "Forward", cookies.forward)
    _write_names(node, "WhitelistedNames", cookies.whitelisted_names)


def _write_forwarded_values(parent: ET.Element, values: ForwardedValues) -> None:
    node = ET.SubElement(parent, "ForwardedValues")
    _text(node, "QueryString", values.query_string)
    _write_cookies(node, values.cookies)
    _write_names(node, "Headers", values.headers)


def _write_trusted_signers(parent: ET.Element, signers: TrustedSigners) -> None:
    node = ET.SubElement(parent, "TrustedSigners")
    _text(node, "Enabled", signers.enabled)
    write_collection(node, encode_collection(signers.aws_account_numbers, ACCOUNT_NUMBER_TAG))


def _write_allowed_methods(parent: ET.Element, methods: AllowedMethods) -> None:
    # Two sibling count+items lists: all allowed methods, then the cached ones.
    node = ET.SubElement(parent, "AllowedMethods")
    write_collection(node, encode_collection(methods.allowed, METHOD_TAG))
    write_collection(ET.SubElement(node, "CachedMethods"), encode_collection(methods.cached, METHOD_TAG))


def write_cache_behavior(parent: ET.Element, tag: str, behavior: CacheBehavior) -> None:
    node = ET.SubElement(parent, tag)
    _text(node, "TargetOriginId", behavior.target_origin_id)
    if behavior.path_pattern:
        _text(node, "PathPattern", behavior.path_pattern)
    _write_forwarded_values(node, behavior.forwarded_values)
    _write_trusted_signers(node, behavior.trusted_signers)
    _text(node, "ViewerProtocolPolicy", behavior.viewer_protocol_policy)
    _text(node, "MinTTL", behavior.min_ttl)
    _write_allowed_methods(node, behavior.allowed_methods)
    _text(node, "SmoothStreaming", behavior.smooth_streaming)


def write_origin(parent: ET.Element, tag: str, origin: Origin) -> None:
    node = ET.SubElement(parent, tag)
    _text(node, "Id", origin.id)
    _text(node, "DomainName", origin.domain_name)
    if origin.origin_path:
        _text(node, "OriginPath", origin.origin_path)
    if origin.s3_origin_config is not None:
        s3 = ET.SubElement(node, "S3OriginConfig")
        _text(s3, "OriginAccessIdentity", origin.s3_origin_config.origin_access_identity)
    if origin.custom_origin_config is not None:
        custom = ET.SubElement(node, "CustomOriginConfig")
        _text(custom, "HTTPPort", origin.custom_origin_config.http_port)
        _text(custom, "HTTPSPort", origin.custom_origin_config.https_port)
        _text(custom, "OriginProtocolPolicy", origin.custom_origin_config.origin_protocol_policy)


def write_custom_error_response(parent: ET.Element, tag: str, response: CustomErrorResponse) -> None:
    node = ET.SubElement(parent, tag)
    _text(node, "ErrorCode", response.error_code)
    _text(node, "ResponsePagePath", response.response_page_path)
    _text(node, "ResponseCode", response.response_code)
    _text(node, "ErrorCachingMinTTL", response.error_caching_min_ttl)


def _write_restrictions(parent: ET.Element, restriction: GeoRestriction) -> None:
    node = ET.SubElement(ET.SubElement(parent, "Restrictions"), "GeoRestriction")
    _text(node, "RestrictionType", restriction.restriction_type)
    write_collection(node, encode_collection(restriction.locations, LOCATION_TAG))


def _write_logging(parent: ET.Element, logging: Logging) -> None:
    node = ET.SubElement(parent, "Logging")
    _text(node, "Enabled", logging.enabled)
    _text(node, "IncludeCookies", logging.include_cookies)
    _text(node, "Bucket", logging.bucket)
    _text(node, "Prefix", logging.prefix)


def _write_viewer_certificate(parent: ET.Element, certificate: ViewerCertificate) -> None:
    node = ET.SubElement(parent, "ViewerCertificate")
    if certificate.iam_certificate_id:
        _text(node, "IAMCertificateId", certificate.iam_certificate_id)
    if certificate.cloudfront_default_certificate:
        _text(node, "CloudFrontDefaultCertificate", True)
    _text(node, "SSLSupportMethod", certificate.ssl_support_method)
    _text(node, "MinimumProtocolVersion", certificate.minimum_protocol_version)


def distribution_config_element(config: DistributionConfig) -> ET.Element:
    root = ET.Element("DistributionConfig", {"xmlns": XML_NAMESPACE})
    _text(root, "CallerReference", config.caller_reference)
    write_collection(ET.SubElement(root, "Aliases"), encode_collection(config.aliases, ALIAS_TAG))
    _text(root, "DefaultRootObject", config.default_root_object)
    write_collection(
        ET.SubElement(root, "Origins"),
        encode_collection(config.origins, ORIGIN_TAG),
        write_origin,
    )
    write_cache_behavior(root, "DefaultCacheBehavior", config.default_cache_behavior)
    _text(root, "Comment", config.comment)
    write_collection(
        ET.SubElement(root, "CacheBehaviors"),
        encode_collection(config.cache_behaviors, CACHE_BEHAVIOR_TAG),
        write_cache_behavior,
    )
    write_collection(
        ET.SubElement(root, "CustomErrorResponses"),
        encode_collection(config.custom_error_responses, CUSTOM_ERROR_RESPONSE_TAG),
        write_custom_error_response,
    )
    _write_restrictions(root, config.restrictions)
    _write_logging(root, config.logging)
    if config.viewer_certificate is not None:
        _write_viewer_certificate(root, config.viewer_certificate)
    _text(root, "PriceClass", config.price_class)
    _text(root, "Enabled", config.enabled)
    return root


def marshal_distribution_config(config: DistributionConfig) -> bytes:
    return ET.tostring(
        distribution_config_element(config),
        encoding="utf-8",
        xml_declaration=True,
        short_empty_elements=False,
    )
