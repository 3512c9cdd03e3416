# colonykit

The core data model for a tile-based colony simulation. It covers how game
objects are stored, linked and restored, how sprite sheets are cut into frames,
how buildings apply upgrades, and how buildings share power.

## Installation

```
pip install .
```

To run the tests, install the test extra:

```
pip install ".[test]"
pytest
```

## Modules

- `colonykit.serialization`: `Variant` is the base of every object that can be
  saved. Restoring runs in three steps: `from_json`, `serialize_publish` and
  `serialize_initialize`. `VariantPtr` refers to another variant by type and
  id, and `SerializeMap.apply` attaches the object once it is loaded.
  `SerializeMap` indexes loaded variants by type and id and iterates over them
  in that order. `VariantFactory` creates instances of registered classes and
  keeps an id counter for each type. If the type is not registered it raises
  `KeyError`. `vec_to_json` and `vec_from_json` store 2D vectors as
  two-element lists.
- `colonykit.jsonio`: `json_file_load` reads JSON that may contain `//` and
  `/* */` comments, which `strip_json_comments` removes. `json_file_write`
  writes JSON indented by four spaces, with sorted keys. A file that cannot be
  read, parsed or written raises `JsonFileError`.
- `colonykit.assets`: `AssetManager` loads `<path>/<name>.png` textures with
  Pillow and cuts them into frames with `load_sprites`. Asking again for the
  same texture and frames returns the same sprite id. Bad arguments raise
  `ValueError` and an unknown texture raises `KeyError`. `split_sprites` takes
  one tile out of the sprites of a building that covers several tiles.
  `generate_null_texture` adds a checkered placeholder texture.
  `ImageAlphaGrid` records which pixels are fully transparent.
- `colonykit.body`: `GameBody.set_target` changes a body's target and keeps
  the targets' follower lists in step. A body cannot target itself.
- `colonykit.power`: `PowerNetwork` tracks the buildings that take power in,
  put power out and store it, one list per `PowerUse`. Networks can be merged,
  and they can be saved to JSON and loaded back.
- `colonykit.buildings`: `UpgradeTree` is one step of a building's upgrade
  path. `available_upgrades` lists the steps not yet applied. `BuildingBase`
  applies steps with `load_upgrade_step`, compares upgrade state with
  `tree_similar`, and can be saved to JSON and loaded back.
- `colonykit.settings`: the settings records (`GameSettings`,
  `SettingsResolution` and the others) and `PopupConfirmationData`, whose
  optional callbacks run on confirm, cancel and after the popup is built.

## Example

```python
from colonykit.serialization import SerializeMap, Variant, VariantFactory

class Tree(Variant):
    pass

factory = VariantFactory()
factory.register_variant(3, Tree)

smap = SerializeMap()
tree = factory.create(smap, 3)
assert smap.get(3, tree.object_id, Tree) is tree
```

## What it does not do

colonykit is a library only. It has no command, no window, no rendering, no
game loop and no user interface. It does not manage save slots on disk, and it
does not read settings files into `GameSettings` or write them out. Buildings
do not run timers, produce resources or spawn units; the package holds their
state and their upgrade logic only.