"""
Permissions and Groups Configuration
This config defines the permission names the API guards with and the default
groups granted them. Used by the seed script to populate/update the tables.
"""

# Resources and the actions guarded on each
MODULES = {
    "users": {
        "entity": "User",
        "actions": ["View", "Create", "Edit", "Delete"],
        "description": "User management and user grants"
    },
    "groups": {
        "entity": "Group",
        "actions": ["View", "Create", "Edit", "Delete"],
        "description": "Group management and group grants"
    },
    "permissions": {
        "entity": "Permission",
        "actions": ["View", "Create", "Edit", "Delete"],
        "description": "Permission catalogue management"
    },
}

# Default groups and the actions they receive on every module
GROUP_TYPES = {
    "Administrators": {
        "actions": ["View", "Create", "Edit", "Delete"],
        "description": "Full administrative access"
    },
    "Viewers": {
        "actions": ["View"],
        "description": "Read-only access"
    }
}


def permission_name(action: str, entity: str) -> str:
    """e.g. ("Create", "User") -> "CreateUser" """
    return f"{action}{entity}"


def generate_permissions():
    """Generate all permissions from MODULES"""
    permissions = []
    for module in MODULES.values():
        for action in module["actions"]:
            permissions.append({
                "name": permission_name(action, module["entity"]),
                "description": f"{action} access: {module['description']}"
            })
    return permissions


def generate_groups():
    """Generate default groups with their permission names"""
    groups = []
    for group_name, group_config in GROUP_TYPES.items():
        names = [
            permission_name(action, module["entity"])
            for module in MODULES.values()
            for action in module["actions"]
            if action in group_config["actions"]
        ]
        groups.append({
            "name": group_name,
            "description": group_config["description"],
            "permissions": names
        })
    return groups


PERMISSION_MATRIX = {
    "permissions": generate_permissions(),
    "groups": generate_groups(),
}


def get_permission_matrix():
    """Get the complete permission matrix"""
    return PERMISSION_MATRIX
