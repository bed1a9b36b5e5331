# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""KEDA external scaler wire protocol.

``externalscaler_pb2`` and ``externalscaler_pb2_grpc`` are generated from
the ``externalscaler.proto`` shipped in this package when this module is
first imported, so no protoc step runs at build time.
"""

import grpc

PROTO_FILE = "manual_scaler/scaler/externalscaler.proto"

externalscaler_pb2, externalscaler_pb2_grpc = grpc.protos_and_services(PROTO_FILE)

DESCRIPTOR = externalscaler_pb2.DESCRIPTOR
SERVICE_NAME = DESCRIPTOR.services_by_name["ExternalScaler"].full_name
