"""Tests for supplying npmrc content to builds."""

import pytest
from nodejs_provisioning import (
    DEFAULT_TEMPLATE,
    Credential,
    InMemoryCredentialResolver,
    InvalidRegistryUrlError,
    NpmConfig,
    NpmConfigError,
    NpmRegistry,
    NpmrcSupplier,
    TooManyGlobalRegistriesError,
    new_config,
    sensitive_content,
    supply_npmrc,
)


@pytest.fixture
def resolver():
    return InMemoryCredentialResolver({
        "acme-bot": Credential(username="bot", secret="s3cr3t"),
        "ci-token": Credential(username="", secret="npm_abc123"),
    })


class TestSupply:
    """Test the supply step."""

    def test_no_registries(self, resolver):
        """Test content is returned untouched without registries."""
        config = NpmConfig(id="c1", content="fetch-retries = 5")
        assert supply_npmrc(config, resolver) == "fetch-retries = 5"

    def test_no_content_no_registries(self, resolver):
        """Test an empty config supplies an empty file."""
        assert supply_npmrc(NpmConfig(id="c1"), resolver) == ""

    def test_registries_templated(self, resolver):
        """Test registries and credentials are written into the content."""
        config = NpmConfig(
            id="c1",
            content="fetch-retries = 5",
            registries=[
                NpmRegistry(url="https://registry.npmjs.org/"),
                NpmRegistry(url="https://npm.acme.com/", credentials_id="acme-bot", scopes="acme"),
            ],
        )
        assert supply_npmrc(config, resolver) == (
            "fetch-retries = 5\n"
            "registry = https://registry.npmjs.org/\n"
            "always-auth = false\n"
            "@acme:registry = https://npm.acme.com/\n"
            "//npm.acme.com/:always-auth = true\n"
            "//npm.acme.com/:_auth = Ym90OnMzY3IzdA==\n"
        )

    def test_token_credential(self, resolver):
        """Test token credentials are written as _authToken."""
        config = NpmConfig(
            id="c1",
            registries=[NpmRegistry(url="https://npm.acme.com/", credentials_id="ci-token", scopes="acme")],
        )
        content = supply_npmrc(config, resolver)
        assert "//npm.acme.com/:_authToken = npm_abc123\n" in content
        assert "_auth =" not in content

    def test_npm9_format(self, resolver):
        """Test the npm 9 layout omits always-auth."""
        config = NpmConfig(
            id="c1",
            npm9_format=True,
            registries=[NpmRegistry(url="https://npm.acme.com/", credentials_id="acme-bot")],
        )
        content = supply_npmrc(config, resolver)
        assert "always-auth" not in content
        assert "registry = https://npm.acme.com/\n" in content
        assert "//npm.acme.com/:_auth = Ym90OnMzY3IzdA==\n" in content

    def test_unknown_credential(self, resolver):
        """Test unknown credential ids leave the registry anonymous."""
        config = NpmConfig(
            id="c1",
            registries=[NpmRegistry(url="https://npm.acme.com/", credentials_id="missing", scopes="acme")],
        )
        content = supply_npmrc(config, resolver)
        assert "@acme:registry = https://npm.acme.com/\n" in content
        assert "_auth" not in content

    def test_verification_aborts(self, resolver):
        """Test nothing is templated when verification fails."""
        config = NpmConfig(
            id="c1",
            content="fetch-retries = 5",
            registries=[
                NpmRegistry(url="https://one.example.com/"),
                NpmRegistry(url="https://two.example.com/"),
            ],
        )
        with pytest.raises(NpmConfigError, match="Invalid user config") as exc_info:
            supply_npmrc(config, resolver)
        assert isinstance(exc_info.value.__cause__, TooManyGlobalRegistriesError)

    def test_invalid_url_aborts(self, resolver):
        config = NpmConfig(id="c1", registries=[NpmRegistry(url="not a url", scopes="acme")])
        with pytest.raises(NpmConfigError, match="Invalid registry URL"):
            supply_npmrc(config, resolver)

    def test_variable_url_scoped(self, resolver):
        """Test a ${...} url without registry prefix fails as a config error."""
        config = NpmConfig(id="c1", registries=[NpmRegistry(url="${NPM_REGISTRY}", scopes="acme")])
        with pytest.raises(NpmConfigError, match="Invalid user config") as exc_info:
            supply_npmrc(config, resolver)
        assert isinstance(exc_info.value.__cause__, InvalidRegistryUrlError)

    def test_variable_url_global(self, resolver):
        """Test a ${...} url is kept as-is for a global registry."""
        config = NpmConfig(id="c1", registries=[NpmRegistry(url="${NPM_REGISTRY}")])
        assert supply_npmrc(config, resolver) == "registry = ${NPM_REGISTRY}\nalways-auth = false\n"

    def test_padded_url(self, resolver):
        """Test surrounding whitespace in a url doesn't leak into keys or values."""
        config = NpmConfig(
            id="c1",
            registries=[NpmRegistry(url=" https://npm.acme.com/ ", scopes="acme")],
        )
        assert supply_npmrc(config, resolver) == (
            "@acme:registry = https://npm.acme.com/\n"
            "//npm.acme.com/:always-auth = false\n"
        )

    def test_every_scope_without_at(self, resolver):
        """Test '@' written before each scope is not doubled."""
        config = NpmConfig(
            id="c1",
            registries=[NpmRegistry(url="https://npm.acme.com/", scopes="@a @b")],
        )
        assert supply_npmrc(config, resolver) == (
            "@a:registry = https://npm.acme.com/\n"
            "@b:registry = https://npm.acme.com/\n"
            "//npm.acme.com/:always-auth = false\n"
        )

    def test_supplier(self, resolver):
        """Test the default supplier delegates to supply_npmrc."""
        config = NpmConfig(id="c1", content="fetch-retries = 5")
        assert NpmrcSupplier().supply(config, resolver) == "fetch-retries = 5"


def test_sensitive_content(resolver):
    """Test secrets and derived tokens are reported for masking."""
    config = NpmConfig(
        id="c1",
        registries=[
            NpmRegistry(url="https://npm.acme.com/", credentials_id="acme-bot", scopes="acme"),
            NpmRegistry(url="https://registry.npmjs.org/", credentials_id="ci-token"),
        ],
    )
    assert sensitive_content(config, resolver) == ["s3cr3t", "Ym90OnMzY3IzdA==", "npm_abc123"]
    assert sensitive_content(NpmConfig(id="c2"), resolver) == []


def test_new_config():
    """Test a fresh config carries the default template."""
    config = new_config("abc")
    assert config.id == "abc"
    assert config.name == "MyNpmrcConfig"
    assert config.comment == "user config"
    assert config.content == DEFAULT_TEMPLATE.strip()
    assert config.registries == []
