import pytest
from jinja2 import UndefinedError

from vpsprep.provision import commands
from vpsprep.provision.commands import OSFamily, render


def test_user_block_embeds_user_everywhere():
    script = render(commands.ADD_USER, OSFamily.UBUNTU, "deploy")
    assert "useradd --create-home deploy" in script
    assert "echo 'deploy ALL=(ALL) NOPASSWD:ALL'" in script
    assert "/etc/sudoers.d/deploy" in script
    assert "usermod -aG docker deploy" in script
    assert "{{" not in script


def test_sudoers_dropin_is_checked_before_install():
    script = render(commands.ADD_USER, OSFamily.UBUNTU, "deploy")
    check = script.index("visudo -cf /tmp/sudoers.deploy")
    install = script.index("install -m 0440 /tmp/sudoers.deploy /etc/sudoers.d/deploy")
    assert check < install


def test_user_name_is_not_escaped():
    script = render(commands.ADD_USER, OSFamily.UBUNTU, "a b")
    assert "useradd --create-home a b" in script


@pytest.mark.parametrize("block", [commands.ESSENTIALS, commands.SWAP, commands.FAIL2BAN])
def test_family_specific_blocks_differ(block):
    assert render(block, OSFamily.UBUNTU, "deploy") != render(block, OSFamily.RHEL, "deploy")


@pytest.mark.parametrize(
    "block",
    [commands.STORAGE, commands.ADD_USER, commands.FIREWALL, commands.UNATTENDED_UPGRADES, commands.DISABLE_ROOT],
)
def test_shared_blocks_are_identical(block):
    assert render(block, OSFamily.UBUNTU, "deploy") == render(block, OSFamily.RHEL, "deploy")


def test_essentials_variants():
    assert "apt-get install -y docker.io curl unattended-upgrades" in render(commands.ESSENTIALS, OSFamily.UBUNTU, "x")
    rhel = render(commands.ESSENTIALS, OSFamily.RHEL, "x")
    assert "docker-ce.repo" in rhel
    assert "apt-get" not in rhel


def test_swap_settings():
    for family in OSFamily:
        script = render(commands.SWAP, family, "x")
        assert "chmod 600 /swapfile" in script
        assert "/etc/fstab" in script
        assert "vm.swappiness=20" in script


def test_firewall_has_no_rhel_variant():
    assert commands.FIREWALL.rhel is None
    script = render(commands.FIREWALL, OSFamily.RHEL, "x")
    for port in ("22", "80", "443"):
        assert f"ufw allow {port}" in script
    assert "ufw default deny incoming" in script


def test_unattended_upgrades_config_lines():
    script = render(commands.UNATTENDED_UPGRADES, OSFamily.UBUNTU, "x")
    assert 'APT::Periodic::Update-Package-Lists "1";\\n' in script
    assert 'APT::Periodic::Unattended-Upgrade "1";\\n' in script
    assert "systemctl restart unattended-upgrades" in script


def test_disable_root_settings():
    script = render(commands.DISABLE_ROOT, OSFamily.UBUNTU, "x")
    assert "PasswordAuthentication no" in script
    assert "PermitRootLogin no" in script


def test_storage_is_owned_by_first_regular_uid():
    script = render(commands.STORAGE, OSFamily.UBUNTU, "x")
    assert "chmod 700 /storage" in script
    assert "chown 1000:1000 /storage" in script


def test_render_requires_user():
    block = commands.CommandBlock(name="t", ubuntu="echo {{ other }}")
    with pytest.raises(UndefinedError):
        render(block, OSFamily.UBUNTU, "deploy")


def test_blocks_table_is_complete():
    assert set(commands.BLOCKS) == {
        "essentials", "swap", "storage", "user", "fail2ban",
        "firewall", "unattended_upgrades", "disable_root",
    }
