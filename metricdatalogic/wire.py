"""
Protocol-buffer schema of the carbonapi v3 fetch response.

The descriptors are assembled at import time in a private pool, so the
package needs no generated *_pb2 module and cannot clash with one loaded by
the host application.
"""

from __future__ import annotations

from typing import Iterable, Type

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import Message

from .types import FetchRecord

PACKAGE = "carbonapi_v3_pb"

_F = descriptor_pb2.FieldDescriptorProto

# (number, name, type, label)
FETCH_RESPONSE_FIELDS = (
    (1, "name", _F.TYPE_STRING, _F.LABEL_OPTIONAL),
    (2, "pathExpression", _F.TYPE_STRING, _F.LABEL_OPTIONAL),
    (3, "consolidationFunc", _F.TYPE_STRING, _F.LABEL_OPTIONAL),
    (4, "startTime", _F.TYPE_INT64, _F.LABEL_OPTIONAL),
    (5, "stopTime", _F.TYPE_INT64, _F.LABEL_OPTIONAL),
    (6, "stepTime", _F.TYPE_INT64, _F.LABEL_OPTIONAL),
    (7, "xFilesFactor", _F.TYPE_FLOAT, _F.LABEL_OPTIONAL),
    (8, "highPrecisionTimestamps", _F.TYPE_BOOL, _F.LABEL_OPTIONAL),
    (9, "values", _F.TYPE_DOUBLE, _F.LABEL_REPEATED),
    (10, "appliedFunctions", _F.TYPE_STRING, _F.LABEL_REPEATED),
    (11, "requestStartTime", _F.TYPE_INT64, _F.LABEL_OPTIONAL),
    (12, "requestStopTime", _F.TYPE_INT64, _F.LABEL_OPTIONAL),
)


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    fd = descriptor_pb2.FileDescriptorProto(
        name=f"{PACKAGE}/{PACKAGE}.proto", package=PACKAGE, syntax="proto3"
    )
    fetch = fd.message_type.add(name="FetchResponse")
    for number, name, ftype, label in FETCH_RESPONSE_FIELDS:
        fetch.field.add(name=name, json_name=name, number=number, type=ftype, label=label)

    multi = fd.message_type.add(name="MultiFetchResponse")
    multi.field.add(
        name="metrics",
        json_name="metrics",
        number=1,
        type=_F.TYPE_MESSAGE,
        label=_F.LABEL_REPEATED,
        type_name=f".{PACKAGE}.FetchResponse",
    )
    return fd


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor().SerializeToString())

FetchResponse: Type[Message] = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.FetchResponse")
)
MultiFetchResponse: Type[Message] = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.MultiFetchResponse")
)


def fill_fetch_response(msg: Message, rec: FetchRecord) -> None:
    msg.name = rec.name
    msg.pathExpression = rec.path_expression
    msg.consolidationFunc = rec.consolidation_func
    msg.startTime = rec.start_time
    msg.stopTime = rec.stop_time
    msg.stepTime = rec.step_time
    msg.xFilesFactor = rec.x_files_factor
    msg.highPrecisionTimestamps = rec.high_precision_timestamps
    msg.values.extend(rec.values)
    msg.appliedFunctions.extend(rec.applied_functions)
    msg.requestStartTime = rec.request_start_time
    msg.requestStopTime = rec.request_stop_time


def multi_fetch_response(records: Iterable[FetchRecord]) -> Message:
    response = MultiFetchResponse()
    for rec in records:
        fill_fetch_response(response.metrics.add(), rec)
    return response
