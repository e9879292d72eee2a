"""Tests for syncing linked skills."""

import pytest

from skillkit import DeployTarget, LinkKind, LinkOptions, LinkRegistry, LinkSynchronizer
from skillkit.errors import RegistryCorruptError
from skillkit.types import OutcomeStatus, SkillLink, SkillLinkRegistry, SyncFailure

SKILL_MD = """\
---
name: remote-skill
description: Skill that lives in a repository
---

Remote instructions.
"""


@pytest.fixture
def registry(paths) -> LinkRegistry:
    return LinkRegistry(paths)


@pytest.fixture
def options() -> LinkOptions:
    return LinkOptions(target=DeployTarget.CLAUDE)


async def _store(registry: LinkRegistry, options: LinkOptions, *links: SkillLink) -> None:
    # Writes directly so tests can hold links that add() would refuse.
    await registry.write(options, SkillLinkRegistry(links=list(links)))


def _git_link(**overrides) -> SkillLink:
    fields = dict(name="remote", kind=LinkKind.GIT, source="https://github.com/acme/skills.git")
    fields.update(overrides)
    return SkillLink(**fields)


@pytest.mark.asyncio
async def test_sync_local_link_deploys(registry, options, make_skill, paths, fake_retriever):
    skill_dir = make_skill("local-skill")
    await registry.add("mine", str(skill_dir), options)
    retriever = fake_retriever()

    result = await LinkSynchronizer(registry, retriever).sync("mine", options)

    assert result.success
    assert result.status is OutcomeStatus.SUCCEEDED
    assert result.deploy_results[0].path == paths.home / ".claude" / "skills" / "local-skill"
    assert retriever.calls == []


@pytest.mark.asyncio
async def test_sync_local_invalid_skill_skips_deploy(registry, options, make_skill, paths):
    skill_dir = make_skill("local-skill")
    await registry.add("mine", str(skill_dir), options)
    (skill_dir / "SKILL.md").write_text("---\nname: Broken Name\n---\n")

    result = await LinkSynchronizer(registry).sync("mine", options)

    assert not result.success
    assert result.failure is SyncFailure.INVALID_SKILL
    assert result.deploy_results == []
    assert not (paths.home / ".claude" / "skills").exists()


@pytest.mark.asyncio
async def test_sync_unknown_link(registry, options):
    result = await LinkSynchronizer(registry).sync("ghost", options)
    assert result.failure is SyncFailure.NOT_FOUND
    assert result.link is None


@pytest.mark.asyncio
async def test_sync_disabled_link_is_refused(registry, options, fake_retriever):
    await _store(registry, options, _git_link(enabled=False))
    retriever = fake_retriever(files={"SKILL.md": SKILL_MD})

    result = await LinkSynchronizer(registry, retriever).sync("remote", options)

    assert result.failure is SyncFailure.DISABLED
    assert retriever.calls == []


@pytest.mark.asyncio
async def test_sync_git_link_with_sub_path(registry, options, paths, fake_retriever):
    await _store(registry, options, _git_link(path="skills/remote-skill", branch="dev"))
    retriever = fake_retriever(files={"skills/remote-skill/SKILL.md": SKILL_MD, "README.md": "x"})

    result = await LinkSynchronizer(registry, retriever).sync("remote", options)

    assert result.success
    url, branch, dest = retriever.calls[0]
    assert url == "https://github.com/acme/skills.git"
    assert branch == "dev"
    deployed = paths.home / ".claude" / "skills" / "remote-skill"
    assert (deployed / "SKILL.md").read_text() == SKILL_MD
    assert not (deployed / "README.md").exists()
    assert not dest.exists()


@pytest.mark.asyncio
async def test_sync_git_uses_default_branch(registry, options, fake_retriever):
    await _store(registry, options, _git_link())
    retriever = fake_retriever(files={"SKILL.md": SKILL_MD})

    result = await LinkSynchronizer(registry, retriever, default_branch="trunk").sync(
        "remote", options
    )

    assert result.success
    assert retriever.calls[0][1] == "trunk"
    assert not retriever.last_dest.exists()


@pytest.mark.asyncio
async def test_sync_git_retrieval_failure_cleans_up(registry, options, paths, fake_retriever):
    await _store(registry, options, _git_link())
    retriever = fake_retriever(error="Git clone failed: repository not found")

    result = await LinkSynchronizer(registry, retriever).sync("remote", options)

    assert not result.success
    assert result.failure is SyncFailure.RETRIEVAL_FAILED
    assert "repository not found" in result.error
    assert not retriever.last_dest.exists()
    assert not (paths.home / ".claude" / "skills").exists()


@pytest.mark.asyncio
async def test_sync_git_deploy_failure_still_cleans_up(registry, options, paths, fake_retriever):
    await _store(registry, options, _git_link())
    (paths.home / ".claude" / "skills" / "remote-skill").mkdir(parents=True)
    retriever = fake_retriever(files={"SKILL.md": SKILL_MD})

    result = await LinkSynchronizer(registry, retriever).sync("remote", options)

    assert not result.success
    assert result.failure is SyncFailure.ALREADY_EXISTS
    assert result.status is OutcomeStatus.SKIPPED
    assert not retriever.last_dest.exists()


@pytest.mark.asyncio
async def test_sync_force_overwrites(registry, paths, fake_retriever):
    options = LinkOptions(target=DeployTarget.CLAUDE, force=True)
    await _store(registry, options, _git_link())
    (paths.home / ".claude" / "skills" / "remote-skill").mkdir(parents=True)
    retriever = fake_retriever(files={"SKILL.md": SKILL_MD})

    result = await LinkSynchronizer(registry, retriever).sync("remote", options)

    assert result.success


@pytest.mark.asyncio
async def test_sync_sub_path_outside_clone_is_rejected(registry, options, fake_retriever):
    await _store(registry, options, _git_link(path="../outside"))
    retriever = fake_retriever(files={"SKILL.md": SKILL_MD})

    result = await LinkSynchronizer(registry, retriever).sync("remote", options)

    assert result.failure is SyncFailure.INVALID_SKILL
    assert not retriever.last_dest.exists()


@pytest.mark.asyncio
async def test_sync_web_link_unsupported(registry, options):
    await registry.add("site", "https://example.com/skill", options)
    result = await LinkSynchronizer(registry).sync("site", options)
    assert result.failure is SyncFailure.UNSUPPORTED


@pytest.mark.asyncio
async def test_sync_project_scope_deploys_into_cwd(make_skill, paths, fake_retriever):
    registry = LinkRegistry(paths)
    options = LinkOptions(target=DeployTarget.CODEX, user_level=False)
    await registry.add("mine", str(make_skill("local-skill")), options)

    result = await LinkSynchronizer(registry, fake_retriever()).sync("mine", options)

    assert result.deploy_results[0].path == paths.cwd / ".codex" / "skills" / "local-skill"


@pytest.mark.asyncio
async def test_sync_all_skips_disabled_and_isolates_failures(
    registry, options, make_skill, fake_retriever
):
    local = make_skill("local-skill")
    await _store(
        registry,
        options,
        _git_link(name="broken"),
        SkillLink(name="off", kind=LinkKind.LOCAL, source=str(local), enabled=False),
        SkillLink(name="mine", kind=LinkKind.LOCAL, source=str(local)),
    )
    retriever = fake_retriever(error="Git clone failed: boom")

    results = await LinkSynchronizer(registry, retriever).sync_all(options)

    assert [r.link.name for r in results] == ["broken", "mine"]
    assert [r.success for r in results] == [False, True]
    assert results[0].failure is SyncFailure.RETRIEVAL_FAILED


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content",
    [
        b"{not json",
        b'{"version": "1.0.0", "links": [\xff]}',
        b'{"version": "1.0.0", "links": [{"name": "remote", "type": "git", "source": "x", "path": 5}]}',
    ],
)
async def test_sync_unreadable_registry_is_reported(registry, options, paths, content):
    path = paths.home / ".claude" / "skill-links.json"
    path.parent.mkdir(parents=True)
    path.write_bytes(content)

    result = await LinkSynchronizer(registry).sync("remote", options)

    assert not result.success
    assert result.failure is SyncFailure.REGISTRY_CORRUPT
    assert result.link is None
    assert result.status is OutcomeStatus.FAILED


@pytest.mark.asyncio
async def test_sync_all_rejects_mistyped_entry(
    registry, options, paths, make_skill, fake_retriever
):
    skill_dir = make_skill("local-skill")
    path = paths.home / ".claude" / "skill-links.json"
    path.parent.mkdir(parents=True)
    path.write_text(
        '{"version": "1.0.0", "links": ['
        '{"name": "remote", "type": "git", "source": "https://github.com/a/b", "path": 5}, '
        f'{{"name": "mine", "type": "local", "source": "{skill_dir.as_posix()}"}}]}}'
    )
    retriever = fake_retriever(files={"SKILL.md": SKILL_MD})

    with pytest.raises(RegistryCorruptError, match="path"):
        await LinkSynchronizer(registry, retriever).sync_all(options)
    assert retriever.calls == []
