"""Tests for CLI commands."""
import pytest
from click.testing import CliRunner
from unittest.mock import MagicMock, patch

from powervs_client.errors import InstanceNotFoundError, SecretNotFoundError
from powervs_client.models import Images, Network, Networks, PVMInstance, ServiceInstance


@pytest.fixture(autouse=True)
def clean_env(mock_env_vars):
    mock_env_vars(
        POWERVS_CLOUD_INSTANCE_ID=None,
        POWERVS_DEBUG=None,
        IBMCLOUD_API_KEY=None,
        IBMCLOUD_IAM_ENDPOINT=None,
        IBMCLOUD_RC_ENDPOINT=None,
    )


class TestInstancesCommand:
    """Tests for instance commands."""

    @patch("powervs_client.cli.new_validated_client")
    def test_instances_lists_provider_ids(self, mock_new_client, make_instances):
        from powervs_client.cli import cli

        mock_new_client.return_value.list_instances.return_value = make_instances("worker-1")

        runner = CliRunner()
        result = runner.invoke(cli, ["--cloud-instance-id", "cid", "instances"])

        assert result.exit_code == 0
        assert "worker-1" in result.output
        assert "ibmpowervs:///id-worker-1" in result.output
        args = mock_new_client.call_args[0]
        assert args == ("powervs-credentials", "openshift-machine-api", "cid")

    @patch("powervs_client.cli.new_validated_client")
    def test_instances_empty(self, mock_new_client, make_instances):
        from powervs_client.cli import cli

        mock_new_client.return_value.list_instances.return_value = make_instances()

        result = CliRunner().invoke(cli, ["-c", "cid", "instances"])

        assert result.exit_code == 0
        assert "No instances found" in result.output

    def test_instances_requires_cloud_instance(self):
        from powervs_client.cli import cli

        result = CliRunner().invoke(cli, ["instances"])

        assert result.exit_code == 1
        assert "Cloud instance ID not configured" in result.output

    @patch("powervs_client.cli.new_validated_client")
    def test_bootstrap_failure(self, mock_new_client):
        from powervs_client.cli import cli

        mock_new_client.side_effect = SecretNotFoundError.for_secret("ns", "creds")

        result = CliRunner().invoke(cli, ["-c", "cid", "-s", "creds", "-n", "ns", "instances"])

        assert result.exit_code == 1
        assert "ns/creds not found" in result.output

    @patch("powervs_client.cli.new_validated_client")
    def test_instance_by_name(self, mock_new_client):
        from powervs_client.cli import cli

        mock_new_client.return_value.get_instance_by_name.return_value = PVMInstance(
            pvm_instance_id="id-1", server_name="worker-1", status="ACTIVE"
        )

        result = CliRunner().invoke(cli, ["-c", "cid", "instance", "worker-1"])

        assert result.exit_code == 0
        assert "ibmpowervs:///id-1" in result.output

    @patch("powervs_client.cli.new_validated_client")
    def test_instance_by_name_missing(self, mock_new_client):
        from powervs_client.cli import cli

        mock_new_client.return_value.get_instance_by_name.side_effect = InstanceNotFoundError()

        result = CliRunner().invoke(cli, ["-c", "cid", "instance", "ghost"])

        assert result.exit_code == 1
        assert "No instance named ghost" in result.output

    @patch("powervs_client.cli.new_validated_client")
    def test_delete(self, mock_new_client):
        from powervs_client.cli import cli

        result = CliRunner().invoke(cli, ["-c", "cid", "delete", "id-1", "--yes"])

        assert result.exit_code == 0
        mock_new_client.return_value.delete_instance.assert_called_once_with("id-1")


class TestListingCommands:
    """Tests for network, image and service instance listings."""

    @patch("powervs_client.cli.new_validated_client")
    def test_networks(self, mock_new_client):
        from powervs_client.cli import cli

        mock_new_client.return_value.list_networks.return_value = Networks(
            networks=[Network(network_id="net-1", name="public-net", type="pub-vlan")]
        )

        result = CliRunner().invoke(cli, ["-c", "cid", "networks"])

        assert result.exit_code == 0
        assert "public-net" in result.output

    @patch("powervs_client.cli.new_validated_client")
    def test_images(self, mock_new_client):
        from powervs_client.cli import cli

        mock_new_client.return_value.list_images.return_value = Images.model_validate(
            {"images": [{"imageID": "img-1", "name": "rhcos", "state": "active"}]}
        )

        result = CliRunner().invoke(cli, ["-c", "cid", "images"])

        assert result.exit_code == 0
        assert "rhcos" in result.output

    @patch("powervs_client.cli.new_client_minimal")
    def test_service_instances_with_api_key(self, mock_minimal):
        from powervs_client.cli import cli

        mock_minimal.return_value.list_service_instances.return_value = [
            ServiceInstance(name="workspace-1", guid="g1", region_id="dal12", state="active"),
        ]

        result = CliRunner().invoke(cli, ["service-instances", "--api-key", "my-api-key"])

        assert result.exit_code == 0
        assert "workspace-1" in result.output
        assert mock_minimal.call_args[0][0] == "my-api-key"

    @patch("powervs_client.cli.SecretManager")
    @patch("powervs_client.cli.new_client_minimal")
    def test_service_instances_from_secret(self, mock_minimal, mock_secret_manager):
        from powervs_client.cli import cli

        mock_secret_manager.return_value.get_api_key.return_value = "secret-key"
        mock_minimal.return_value.list_service_instances.return_value = []

        result = CliRunner().invoke(cli, ["service-instances"])

        assert result.exit_code == 0
        assert "No Power VS service instances found" in result.output
        assert mock_minimal.call_args[0][0] == "secret-key"


class TestProviderIDCommand:
    """Tests for provider-id."""

    def test_provider_id(self):
        from powervs_client.cli import cli

        result = CliRunner().invoke(cli, ["provider-id", "abc123"])

        assert result.exit_code == 0
        assert result.output.strip() == "ibmpowervs:///abc123"
