# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vpsprep/config/models.py

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RoleSpec(BaseModel):
    """A server role in long form (``web: {hosts: [...]}``)."""
    model_config = ConfigDict(extra="ignore")

    hosts: List[str] = Field(default_factory=list)


class AccessorySpec(BaseModel):
    """
    An accessory service. Kamal allows either a single ``host`` or a
    ``hosts`` list; both are honoured.
    """
    model_config = ConfigDict(extra="ignore")

    host: Optional[str] = None
    hosts: List[str] = Field(default_factory=list)

    def all_hosts(self) -> List[str]:
        return ([self.host] if self.host else []) + list(self.hosts)


class SSHSpec(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user: str                           # account created on every host


class DeployConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    service: Optional[str] = None
    # plain host list, or role name -> host list / RoleSpec
    servers: Union[List[str], Dict[str, Union[List[str], RoleSpec]]] = Field(default_factory=list)
    accessories: Dict[str, AccessorySpec] = Field(default_factory=dict)
    ssh: SSHSpec

    def role_hosts(self) -> List[str]:
        if isinstance(self.servers, list):
            return list(self.servers)
        hosts: List[str] = []
        for role in self.servers.values():
            hosts.extend(role.hosts if isinstance(role, RoleSpec) else role)
        return hosts

    def accessory_hosts(self) -> List[str]:
        hosts: List[str] = []
        for acc in self.accessories.values():
            hosts.extend(acc.all_hosts())
        return hosts
