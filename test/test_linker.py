"""Tests for the link registry."""

import json

import pytest

from skillkit import DeployTarget, LinkKind, LinkOptions, LinkRegistry
from skillkit.errors import RegistryCorruptError
from skillkit.linker import infer_kind, validate_link
from skillkit.types import SkillLink


@pytest.fixture
def registry(paths) -> LinkRegistry:
    return LinkRegistry(paths)


@pytest.fixture
def options() -> LinkOptions:
    return LinkOptions(target=DeployTarget.CLAUDE)


class TestInferKind:
    def test_github_url_is_git(self):
        assert infer_kind("https://github.com/acme/skills") is LinkKind.GIT

    def test_git_suffix_is_git(self):
        assert infer_kind("https://example.com/acme/skills.git") is LinkKind.GIT

    def test_other_http_is_web(self):
        assert infer_kind("http://example.com/skill") is LinkKind.WEB

    def test_everything_else_is_local(self):
        assert infer_kind("~/skills/mine") is LinkKind.LOCAL
        assert infer_kind("./relative") is LinkKind.LOCAL


class TestValidateLink:
    @pytest.mark.asyncio
    async def test_bad_name(self, paths):
        link = SkillLink(name="Bad Name", kind=LinkKind.WEB, source="https://x.io")
        assert "lowercase" in await validate_link(link, paths)

    @pytest.mark.asyncio
    async def test_git_requires_url_or_ssh(self, paths):
        ok = SkillLink(name="a", kind=LinkKind.GIT, source="git@github.com:acme/skills.git")
        bad = SkillLink(name="a", kind=LinkKind.GIT, source="/tmp/repo")
        assert await validate_link(ok, paths) is None
        assert "Git source" in await validate_link(bad, paths)

    @pytest.mark.asyncio
    async def test_web_requires_http(self, paths):
        bad = SkillLink(name="a", kind=LinkKind.WEB, source="ftp://x")
        assert "HTTP(S)" in await validate_link(bad, paths)

    @pytest.mark.asyncio
    async def test_local_must_be_valid_skill_dir(self, paths, make_skill, tmp_path):
        good = make_skill("local-skill")
        assert await validate_link(
            SkillLink(name="a", kind=LinkKind.LOCAL, source=str(good)), paths
        ) is None

        empty = tmp_path / "empty"
        empty.mkdir()
        problem = await validate_link(
            SkillLink(name="a", kind=LinkKind.LOCAL, source=str(empty)), paths
        )
        assert problem.startswith("Invalid skill directory")

        missing = await validate_link(
            SkillLink(name="a", kind=LinkKind.LOCAL, source=str(tmp_path / "gone")), paths
        )
        assert missing.startswith("Cannot access source")

    @pytest.mark.asyncio
    async def test_local_home_marker_uses_injected_home(self, paths, make_skill):
        make_skill("home-skill", parent=paths.home / "skills")
        link = SkillLink(name="a", kind=LinkKind.LOCAL, source="~/skills/home-skill")
        assert await validate_link(link, paths) is None


class TestRegistryFile:
    @pytest.mark.asyncio
    async def test_missing_file_reads_empty(self, registry, options):
        result = await registry.read(options)
        assert result.version == "1.0.0"
        assert result.links == []

    @pytest.mark.asyncio
    async def test_written_document_shape(self, registry, options, paths):
        result = await registry.add(
            "remote",
            "https://github.com/acme/skills",
            options,
            path="skills/remote",
            description="Remote skill",
        )
        assert result.success

        data = json.loads((paths.home / ".claude" / "skill-links.json").read_text())
        assert data == {
            "version": "1.0.0",
            "links": [
                {
                    "name": "remote",
                    "type": "git",
                    "source": "https://github.com/acme/skills",
                    "path": "skills/remote",
                    "enabled": True,
                    "description": "Remote skill",
                }
            ],
        }

    @pytest.mark.asyncio
    async def test_project_scope_uses_cwd(self, registry, paths):
        options = LinkOptions(target=DeployTarget.CODEX, user_level=False)
        await registry.add("site", "https://example.com/skill", options)
        assert (paths.cwd / ".codex" / "skill-links.json").exists()
        assert not (paths.home / ".codex").exists()

    @pytest.mark.asyncio
    async def test_invalid_json_is_corrupt(self, registry, options, paths):
        path = paths.home / ".claude" / "skill-links.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")
        with pytest.raises(RegistryCorruptError):
            await registry.read(options)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "document",
        [
            [],
            {"links": []},
            {"version": "1.0.0", "links": {}},
            {"version": "1.0.0", "links": [{"name": "a", "type": "ftp", "source": "x"}]},
            {"version": "1.0.0", "links": [{"name": "a", "type": "git"}]},
            {"version": "1.0.0", "links": [{"name": "a", "type": "git", "source": "x", "path": 5}]},
            {"version": "1.0.0", "links": [{"name": "a", "type": "git", "source": "x", "branch": []}]},
            {
                "version": "1.0.0",
                "links": [{"name": "a", "type": "web", "source": "x", "description": {"k": 1}}],
            },
        ],
    )
    async def test_bad_structure_is_corrupt(self, registry, options, paths, document):
        path = paths.home / ".claude" / "skill-links.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps(document))
        with pytest.raises(RegistryCorruptError):
            await registry.read(options)

    @pytest.mark.asyncio
    async def test_undecodable_file_is_corrupt(self, registry, options, paths):
        path = paths.home / ".claude" / "skill-links.json"
        path.parent.mkdir(parents=True)
        path.write_bytes(b'{"version": "1.0.0", "links": [\xff]}')

        with pytest.raises(RegistryCorruptError, match="UTF-8"):
            await registry.read(options)
        added = await registry.add("site", "https://example.com/skill", options)
        toggled = await registry.toggle("site", False, options)
        assert not added.success
        assert "UTF-8" in added.error
        assert not toggled.success

    @pytest.mark.asyncio
    async def test_corrupt_registry_fails_add_without_rewriting(self, registry, options, paths):
        path = paths.home / ".claude" / "skill-links.json"
        path.parent.mkdir(parents=True)
        path.write_text("[]")
        result = await registry.add("site", "https://example.com/skill", options)
        assert not result.success
        assert path.read_text() == "[]"


class TestLinkCrud:
    @pytest.mark.asyncio
    async def test_add_twice_without_force_keeps_original(self, registry, options):
        first = await registry.add("x", "https://example.com/one", options)
        second = await registry.add("x", "https://example.com/two", options)

        assert first.success
        assert not second.success
        assert "already exists" in second.error
        links = await registry.list_links(options)
        assert [(l.name, l.source) for l in links] == [("x", "https://example.com/one")]

    @pytest.mark.asyncio
    async def test_add_with_force_replaces_in_place(self, registry, options):
        await registry.add("a", "https://example.com/a", options)
        await registry.add("x", "https://example.com/one", options)
        await registry.add("z", "https://example.com/z", options)

        forced = LinkOptions(target=options.target, force=True)
        result = await registry.add("x", "https://github.com/acme/two", forced)

        assert result.success
        links = await registry.list_links(options)
        assert [l.name for l in links] == ["a", "x", "z"]
        assert links[1].source == "https://github.com/acme/two"
        assert links[1].kind is LinkKind.GIT

    @pytest.mark.asyncio
    async def test_invalid_link_not_persisted(self, registry, options, paths):
        result = await registry.add("x", "/does/not/exist", options)
        assert not result.success
        assert not (paths.home / ".claude" / "skill-links.json").exists()

    @pytest.mark.asyncio
    async def test_explicit_kind_overrides_inference(self, registry, options):
        result = await registry.add(
            "x", "https://example.com/repo", options, kind=LinkKind.GIT, branch="dev"
        )
        assert result.link.kind is LinkKind.GIT
        assert result.link.branch == "dev"

    @pytest.mark.asyncio
    async def test_remove_then_list_is_empty(self, registry, options):
        await registry.add("x", "https://example.com/one", options)
        removed = await registry.remove("x", options)

        assert removed.success
        assert removed.link.name == "x"
        assert await registry.list_links(options) == []

    @pytest.mark.asyncio
    async def test_remove_unknown(self, registry, options):
        result = await registry.remove("ghost", options)
        assert not result.success
        assert result.error == 'Link "ghost" not found'

    @pytest.mark.asyncio
    async def test_toggle(self, registry, options):
        await registry.add("x", "https://example.com/one", options)

        disabled = await registry.toggle("x", False, options)
        assert disabled.success
        assert (await registry.list_links(options))[0].enabled is False

        enabled = await registry.toggle("x", True, options)
        assert enabled.success
        assert (await registry.list_links(options))[0].enabled is True

        missing = await registry.toggle("ghost", True, options)
        assert not missing.success
