# tests/test_cli.py
from __future__ import annotations

import pytest

from app.cli import parse_args, run
from app.core.security import verify_password
from app.crud.admin_user import get_admin_by_username


@pytest.mark.asyncio
async def test_create_admin(sessionmaker, db, capsys):
    args = parse_args(
        ["create-admin", "--username", "owner", "--password", "pw-1", "--tenant", "piddle-inn", "--display-name", "Owner"]
    )
    assert await run(args, sessionmaker) == 0

    user = await get_admin_by_username(db, "owner")
    assert user is not None
    assert user.property_id == "piddle-inn"
    assert user.display_name == "Owner"
    assert verify_password("pw-1", user.password_hash)
    assert "Admin created" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_create_admin_refuses_duplicates(sessionmaker, admin_user, capsys):
    args = parse_args(["create-admin", "--username", "admin", "--password", "x", "--tenant", "preswylfa"])
    assert await run(args, sessionmaker) == 1
    assert "already exists" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_create_admin_warns_on_unknown_tenant(sessionmaker, capsys):
    args = parse_args(["create-admin", "--username", "ghost", "--password", "x", "--tenant", "elsewhere"])
    assert await run(args, sessionmaker) == 0
    assert "Warning" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_reset_password(sessionmaker, admin_user, capsys):
    args = parse_args(["reset-password", "--username", "admin", "--password", "new-pass"])
    assert await run(args, sessionmaker) == 0

    async with sessionmaker() as session:
        user = await get_admin_by_username(session, "admin")
    assert verify_password("new-pass", user.password_hash)
    assert not verify_password("correct horse", user.password_hash)


@pytest.mark.asyncio
async def test_reset_password_unknown_user(sessionmaker, capsys):
    args = parse_args(["reset-password", "--username", "nobody", "--password", "x"])
    assert await run(args, sessionmaker) == 1
    assert "not found" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_hash_password(sessionmaker, capsys):
    assert await run(parse_args(["hash-password", "a", "b"]), sessionmaker) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    password, hashed = lines[0].split(": ", 1)
    assert password == "a"
    assert verify_password("a", hashed)


def test_subcommand_is_required():
    with pytest.raises(SystemExit):
        parse_args([])
