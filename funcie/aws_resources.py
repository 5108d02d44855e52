"""Listing of the AWS resources a funcie deployment can be placed into.

The clients are expected to behave like the EC2 and ElastiCache clients of the
AWS SDK: keyword arguments in, response dictionaries out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


class ResourceListError(RuntimeError):
    """Raised when AWS resources cannot be listed."""


class _Ec2Client(Protocol):
    def describe_vpcs(self, **kwargs: Any) -> dict: ...

    def describe_subnets(self, **kwargs: Any) -> dict: ...

    def describe_route_tables(self, **kwargs: Any) -> dict: ...


class _ElastiCacheClient(Protocol):
    def describe_cache_clusters(self, **kwargs: Any) -> dict: ...


@dataclass(frozen=True)
class Vpc:
    """Basic information about a VPC."""

    id: str
    name: str

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass(frozen=True)
class Subnet:
    """Basic information about a subnet."""

    id: str
    name: str
    public: bool = False
    vpc_id: str = ""

    def __str__(self) -> str:
        kind = "Public" if self.public else "Private"
        return f"{self.name}: {self.id} ({kind})"


@dataclass(frozen=True)
class ElastiCacheCluster:
    """An ElastiCache cluster and the endpoint to reach it."""

    arn: str
    name: str
    primary_endpoint: str = ""

    def __str__(self) -> str:
        return f"{self.name} ({self.primary_endpoint})"


@dataclass(frozen=True)
class ElastiCacheNode:
    """A node in an ElastiCache cluster."""

    name: str
    endpoint: str


def _first_tag_value(resource: dict) -> str:
    tags = resource.get("Tags") or []
    return tags[0].get("Value", "") if tags else ""


class AwsResourceLister:
    """Lists VPCs, subnets and ElastiCache clusters in the configured region."""

    def __init__(self, ec2_client: _Ec2Client, elasticache_client: _ElastiCacheClient) -> None:
        self._ec2 = ec2_client
        self._elasticache = elasticache_client

    def list_vpcs(self) -> list[Vpc]:
        """Return the region's VPCs sorted by name."""
        try:
            result = self._ec2.describe_vpcs()
        except Exception as err:
            raise ResourceListError(f"failed to list VPCs: {err}") from err

        vpcs = [
            Vpc(id=vpc["VpcId"], name=_first_tag_value(vpc))
            for vpc in result.get("Vpcs", [])
        ]
        return sorted(vpcs, key=lambda vpc: vpc.name)

    def list_subnets(self) -> list[Subnet]:
        """Return every subnet in the region, private ones first, then by ID."""
        try:
            result = self._ec2.describe_subnets()
        except Exception as err:
            raise ResourceListError(f"failed to list subnets: {err}") from err

        raw_subnets = result.get("Subnets", [])
        subnet_ids = [subnet["SubnetId"] for subnet in raw_subnets]

        try:
            route_tables = self._ec2.describe_route_tables(
                Filters=[{"Name": "association.subnet-id", "Values": subnet_ids}]
            )
        except Exception as err:
            raise ResourceListError(f"failed to list route tables: {err}") from err

        public_ids = {
            association.get("SubnetId")
            for table in route_tables.get("RouteTables", [])
            if any(
                (route.get("GatewayId") or "").startswith("igw-")
                for route in table.get("Routes", [])
            )
            for association in table.get("Associations", [])
        }

        subnets = [
            Subnet(
                id=subnet["SubnetId"],
                name=_first_tag_value(subnet),
                public=subnet["SubnetId"] in public_ids,
                vpc_id=subnet["VpcId"],
            )
            for subnet in raw_subnets
        ]
        return sorted(subnets, key=lambda subnet: (subnet.public, subnet.id))

    def list_elasticache_clusters(self) -> list[ElastiCacheCluster]:
        """Return the region's ElastiCache clusters sorted by name."""
        try:
            result = self._elasticache.describe_cache_clusters(ShowCacheNodeInfo=True)
        except Exception as err:
            raise ResourceListError(f"failed to list ElastiCache clusters: {err}") from err

        clusters = []
        for cluster in result.get("CacheClusters", []):
            config_endpoint = cluster.get("ConfigurationEndpoint") or {}
            address = config_endpoint.get("Address")
            if address is None:
                address = cluster["CacheNodes"][0]["Endpoint"]["Address"]
            clusters.append(
                ElastiCacheCluster(
                    arn=cluster["ARN"],
                    name=cluster["CacheClusterId"],
                    primary_endpoint=address,
                )
            )
        return sorted(clusters, key=lambda cluster: cluster.name)