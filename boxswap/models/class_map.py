"""
Bidirectional class name <-> id table.
"""

from typing import Any, Mapping, Optional


class ClassMap:
    """
    Name <-> id lookup supplied by the caller for class-mapping transforms.

    Ids are kept as strings, the way annotations carry them.

    Raises:
        ValueError: If two names share an id or a name appears twice
    """

    def __init__(self, name_to_id: Mapping[str, Any]):
        self._name_to_id: dict[str, str] = {}
        self._id_to_name: dict[str, str] = {}

        for name, class_id in name_to_id.items():
            name = str(name)
            class_id = str(class_id)
            if class_id in self._id_to_name:
                raise ValueError(
                    f"Class id {class_id} is assigned to both "
                    f"'{self._id_to_name[class_id]}' and '{name}'"
                )
            self._name_to_id[name] = class_id
            self._id_to_name[class_id] = name

    @classmethod
    def from_names(cls, names) -> 'ClassMap':
        """Build from an ordered list of names, index = id (``classes.txt`` style)."""
        names = list(names)
        if len(set(names)) != len(names):
            raise ValueError("Class names must be unique")
        return cls({name: index for index, name in enumerate(names)})

    def id_for(self, name: str) -> Optional[str]:
        return self._name_to_id.get(name)

    def name_for(self, class_id: str) -> Optional[str]:
        return self._id_to_name.get(str(class_id))

    def names(self) -> list[str]:
        return list(self._name_to_id)

    def __len__(self) -> int:
        return len(self._name_to_id)

    def __contains__(self, name: str) -> bool:
        return name in self._name_to_id

    def __repr__(self) -> str:
        return f"ClassMap({self._name_to_id!r})"
