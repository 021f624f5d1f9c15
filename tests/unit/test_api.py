"""Unit tests for record conversion to and from API dicts."""

import pytest
import yaml

from hcp_fleet.api import (
    ConditionStatus,
    GroupVersion,
    HostedCluster,
    HostedControlPlane,
    PublishingStrategyType,
    ServiceType,
    UpdateState,
    format_time,
    parse_time,
)
from hcp_fleet.exposure import Service, ServiceSpecType
from tests.builders import LATER, NOW

HOSTED_CLUSTER_YAML = """
apiVersion: hypershift.openshift.io/v1alpha1
kind: HostedCluster
metadata:
  name: example
  namespace: clusters
  generation: 4
spec:
  release:
    image: quay.io/openshift-release-dev/ocp-release:4.9.0-x86_64
  networking:
    apiServer:
      advertiseAddress: 1.2.3.4
      port: 6443
  services:
  - service: Ignition
    servicePublishingStrategy:
      type: NodePort
      nodePort:
        port: 30000
  - service: OAuthServer
    servicePublishingStrategy:
      type: Route
status:
  kubeconfig:
    name: example-admin-kubeconfig
  version:
    desired:
      image: quay.io/openshift-release-dev/ocp-release:4.9.0-x86_64
    history:
    - image: quay.io/openshift-release-dev/ocp-release:4.9.0-x86_64
      state: Partial
      startedTime: "2024-05-01T12:00:00Z"
    - image: quay.io/openshift-release-dev/ocp-release:4.8.0-x86_64
      version: 4.8.0
      state: Completed
      startedTime: "2024-05-01T12:00:00Z"
      completionTime: "2024-05-01T12:05:00Z"
  conditions:
  - type: Available
    status: "False"
    reason: KubeconfigMissing
"""

CONTROL_PLANE_YAML = """
metadata:
  name: example
  namespace: clusters-example
spec:
  releaseImage: a
status:
  releaseImage: a
  version: 4.8.0
  lastReleaseImageTransitionTime: "2024-05-01T12:05:00Z"
  conditions:
  - type: Available
    status: "True"
"""


class TestHostedCluster:
    """Tests for HostedCluster conversion."""

    def test_from_yaml(self):
        hc = HostedCluster.from_dict(yaml.safe_load(HOSTED_CLUSTER_YAML))

        assert hc.name == "example"
        assert hc.generation == 4
        assert hc.spec.release.image.endswith("4.9.0-x86_64")
        assert hc.spec.api_server_networking.advertise_address == "1.2.3.4"
        assert hc.spec.api_server_networking.port == 6443
        assert hc.spec.services[0].service == ServiceType.IGNITION
        assert hc.spec.services[0].strategy.node_port.port == 30000
        assert hc.spec.services[1].strategy.type == PublishingStrategyType.ROUTE
        assert hc.spec.services[1].strategy.node_port is None
        assert hc.status.kubeconfig.name == "example-admin-kubeconfig"
        history = hc.status.version.history
        assert [h.state for h in history] == [UpdateState.PARTIAL, UpdateState.COMPLETED]
        assert history[0].completion_time is None
        assert history[1].completion_time == LATER
        assert history[1].version == "4.8.0"
        assert hc.status.conditions[0].status == ConditionStatus.FALSE

    def test_to_dict_keeps_shape(self):
        data = yaml.safe_load(HOSTED_CLUSTER_YAML)
        hc = HostedCluster.from_dict(data)

        out = hc.to_dict()

        assert out["spec"]["services"] == data["spec"]["services"]
        assert out["spec"]["networking"] == data["spec"]["networking"]
        assert out["status"]["version"]["history"][1] == data["status"]["version"]["history"][1]
        assert "completionTime" not in out["status"]["version"]["history"][0]

    def test_empty_record(self):
        hc = HostedCluster.from_dict({})

        assert hc.status.version is None
        assert hc.status.kubeconfig is None
        assert hc.spec.api_server_networking is None

    def test_history_entry_without_start_time_rejected(self):
        data = {"status": {"version": {"history": [{"image": "a", "state": "Partial"}]}}}

        with pytest.raises(ValueError, match="startedTime"):
            HostedCluster.from_dict(data)


class TestHostedControlPlane:
    """Tests for HostedControlPlane conversion."""

    def test_from_yaml(self):
        cp = HostedControlPlane.from_dict(yaml.safe_load(CONTROL_PLANE_YAML))

        assert cp.spec.release_image == "a"
        assert cp.status.version == "4.8.0"
        assert cp.status.last_release_image_transition_time == LATER
        assert cp.status.conditions[0].status == ConditionStatus.TRUE

    def test_to_dict(self):
        cp = HostedControlPlane.from_dict(yaml.safe_load(CONTROL_PLANE_YAML))

        out = cp.to_dict()

        assert out["status"]["lastReleaseImageTransitionTime"] == "2024-05-01T12:05:00Z"
        assert "apiPort" not in out["spec"]


class TestService:
    """Tests for Service conversion."""

    def test_from_dict(self):
        service = Service.from_dict(
            {
                "metadata": {"name": "ignition-server"},
                "spec": {
                    "type": "NodePort",
                    "ports": [
                        {"name": "https", "port": 443, "targetPort": 9090, "nodePort": 30000}
                    ],
                },
            }
        )

        assert service.type == ServiceSpecType.NODE_PORT
        assert service.ports[0].node_port == 30000

    def test_unallocated_node_port_omitted(self):
        out = Service.from_dict({"spec": {"ports": [{"name": "https", "port": 443}]}}).to_dict()

        assert "nodePort" not in out["spec"]["ports"][0]
        assert out["spec"]["type"] == "ClusterIP"


class TestTimes:
    """Tests for timestamp helpers."""

    def test_parse_and_format(self):
        assert parse_time("2024-05-01T12:00:00Z") == NOW
        assert format_time(NOW) == "2024-05-01T12:00:00Z"

    def test_none(self):
        assert parse_time(None) is None
        assert parse_time("") is None
        assert format_time(None) is None


class TestGroupVersion:
    """Tests for GroupVersion parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("v1", GroupVersion("", "v1")),
            ("route.openshift.io/v1", GroupVersion("route.openshift.io", "v1")),
        ],
    )
    def test_parse(self, text, expected):
        assert GroupVersion.parse(text) == expected
        assert str(expected) == text

    @pytest.mark.parametrize("text", ["/v1", "group/", "a/b/c"])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError):
            GroupVersion.parse(text)
