import pytest

from funcie.aws_resources import (
    AwsResourceLister,
    ElastiCacheCluster,
    ResourceListError,
    Subnet,
    Vpc,
)


class FakeEc2:
    def __init__(self, vpcs=None, subnets=None, route_tables=None, error=None):
        self.vpcs = vpcs or {"Vpcs": []}
        self.subnets = subnets or {"Subnets": []}
        self.route_tables = route_tables or {"RouteTables": []}
        self.error = error
        self.calls = []

    def _answer(self, name, kwargs, value):
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error
        return value

    def describe_vpcs(self, **kwargs):
        return self._answer("describe_vpcs", kwargs, self.vpcs)

    def describe_subnets(self, **kwargs):
        return self._answer("describe_subnets", kwargs, self.subnets)

    def describe_route_tables(self, **kwargs):
        return self._answer("describe_route_tables", kwargs, self.route_tables)


class FakeElastiCache:
    def __init__(self, clusters=None, error=None):
        self.clusters = clusters or {"CacheClusters": []}
        self.error = error
        self.calls = []

    def describe_cache_clusters(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.clusters


def _tag(value):
    return [{"Key": "Name", "Value": value}]


def test_list_vpcs():
    ec2 = FakeEc2(vpcs={"Vpcs": [
        {"VpcId": "vpc-2", "Tags": _tag("beta-vpc")},
        {"VpcId": "vpc-1", "Tags": _tag("alpha-vpc")},
    ]})
    vpcs = AwsResourceLister(ec2, FakeElastiCache()).list_vpcs()
    assert vpcs == [Vpc(id="vpc-1", name="alpha-vpc"), Vpc(id="vpc-2", name="beta-vpc")]
    assert ec2.calls == [("describe_vpcs", {})]


def test_list_subnets():
    ec2 = FakeEc2(
        subnets={"Subnets": [
            {"SubnetId": "subnet-2", "VpcId": "vpc-1", "Tags": _tag("beta-subnet")},
            {"SubnetId": "subnet-1", "VpcId": "vpc-1", "Tags": _tag("alpha-subnet")},
        ]},
        route_tables={"RouteTables": [
            {"Associations": [{"SubnetId": "subnet-1"}], "Routes": [{"GatewayId": "igw-1"}]},
            {"Associations": [{"SubnetId": "subnet-2"}], "Routes": [{"GatewayId": "igw-2"}]},
        ]},
    )
    subnets = AwsResourceLister(ec2, FakeElastiCache()).list_subnets()

    assert subnets == [
        Subnet(id="subnet-1", name="alpha-subnet", public=True, vpc_id="vpc-1"),
        Subnet(id="subnet-2", name="beta-subnet", public=True, vpc_id="vpc-1"),
    ]
    assert ec2.calls[1] == (
        "describe_route_tables",
        {"Filters": [{"Name": "association.subnet-id", "Values": ["subnet-2", "subnet-1"]}]},
    )


def test_list_subnets_puts_private_first():
    ec2 = FakeEc2(
        subnets={"Subnets": [
            {"SubnetId": "subnet-1", "VpcId": "vpc-1", "Tags": _tag("pub")},
            {"SubnetId": "subnet-2", "VpcId": "vpc-1", "Tags": _tag("priv")},
        ]},
        route_tables={"RouteTables": [
            {"Associations": [{"SubnetId": "subnet-1"}], "Routes": [{"GatewayId": "igw-1"}]},
            {"Associations": [{"SubnetId": "subnet-2"}], "Routes": [{"GatewayId": "nat-1"}]},
        ]},
    )
    subnets = AwsResourceLister(ec2, FakeElastiCache()).list_subnets()
    assert [(s.id, s.public) for s in subnets] == [("subnet-2", False), ("subnet-1", True)]


def test_list_elasticache_clusters():
    elasticache = FakeElastiCache({"CacheClusters": [
        {
            "ARN": "arn:aws:elasticache:cluster:beta-cluster",
            "CacheClusterId": "beta-cluster",
            "CacheNodes": [{"Endpoint": {"Address": "beta-endpoint"}}],
            "ConfigurationEndpoint": {"Address": "beta-config-endpoint"},
        },
        {
            "ARN": "arn:aws:elasticache:cluster:alpha-cluster",
            "CacheClusterId": "alpha-cluster",
            "CacheNodes": [{"Endpoint": {"Address": "alpha-endpoint"}}],
            "ConfigurationEndpoint": {"Address": "alpha-config-endpoint"},
        },
    ]})
    clusters = AwsResourceLister(FakeEc2(), elasticache).list_elasticache_clusters()

    assert clusters == [
        ElastiCacheCluster(
            arn="arn:aws:elasticache:cluster:alpha-cluster",
            name="alpha-cluster",
            primary_endpoint="alpha-config-endpoint",
        ),
        ElastiCacheCluster(
            arn="arn:aws:elasticache:cluster:beta-cluster",
            name="beta-cluster",
            primary_endpoint="beta-config-endpoint",
        ),
    ]
    assert elasticache.calls == [{"ShowCacheNodeInfo": True}]


def test_elasticache_falls_back_to_first_node():
    elasticache = FakeElastiCache({"CacheClusters": [{
        "ARN": "arn:aws:elasticache:cluster:alpha-cluster",
        "CacheClusterId": "alpha-cluster",
        "CacheNodes": [{"Endpoint": {"Address": "alpha-endpoint"}}],
    }]})
    clusters = AwsResourceLister(FakeEc2(), elasticache).list_elasticache_clusters()
    assert clusters[0].primary_endpoint == "alpha-endpoint"


def test_list_vpcs_wraps_errors():
    lister = AwsResourceLister(FakeEc2(error=RuntimeError("denied")), FakeElastiCache())
    with pytest.raises(ResourceListError, match="failed to list VPCs: denied"):
        lister.list_vpcs()


def test_list_clusters_wraps_errors():
    lister = AwsResourceLister(FakeEc2(), FakeElastiCache(error=RuntimeError("denied")))
    with pytest.raises(ResourceListError, match="failed to list ElastiCache clusters"):
        lister.list_elasticache_clusters()


def test_model_strings():
    assert str(Vpc(id="vpc-1", name="alpha-vpc")) == "alpha-vpc (vpc-1)"
    assert str(Subnet(id="subnet-1", name="alpha-subnet", public=True)) == (
        "alpha-subnet: subnet-1 (Public)"
    )
    assert str(Subnet(id="subnet-1", name="alpha-subnet")) == "alpha-subnet: subnet-1 (Private)"
    assert str(ElastiCacheCluster(arn="a", name="alpha-cluster",
                                  primary_endpoint="alpha-endpoint")) == (
        "alpha-cluster (alpha-endpoint)"
    )