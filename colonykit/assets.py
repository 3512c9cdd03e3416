"""Textures, sprite sheets and per-pixel transparency grids."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from PIL import Image

logger = logging.getLogger(__name__)

IVec = tuple[int, int]

ALPHAGRID_TRANSPARENT = True
NULL_TEXTURE_SIZE = 512
_MAGENTA = (255, 0, 255, 255)
_BLACK = (0, 0, 0, 255)


def _vec_str(v: IVec) -> str:
    return f"({v[0]}, {v[1]})"


@dataclass
class ImageAlphaGrid:
    """A grid telling, for every pixel of an image, whether it is transparent."""

    grid: list[list[bool]] = field(default_factory=list)

    @property
    def height(self) -> int:
        return len(self.grid)

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @classmethod
    def from_image(cls, image: Image.Image) -> "ImageAlphaGrid":
        """Build the grid from an image; fully transparent pixels are True."""
        alpha = image.convert("RGBA").getchannel("A")
        w, h = alpha.size
        data = list(alpha.getdata())
        return cls([[a == 0 for a in data[y * w:(y + 1) * w]] for y in range(h)])

    def pixel(self, x: int, y: int) -> bool:
        """Transparency of a pixel; anything outside the grid counts as transparent."""
        if 0 <= y < self.height and 0 <= x < self.width:
            return self.grid[y][x]
        return ALPHAGRID_TRANSPARENT

    def subsection(self, x: int, y: int, w: int, h: int) -> "ImageAlphaGrid":
        """Copy a rectangle of the grid, padding what falls outside with True."""
        if self.width == 0 or self.height == 0:
            return ImageAlphaGrid()
        return ImageAlphaGrid(
            [[self.pixel(ix, iy) for ix in range(x, x + w)] for iy in range(y, y + h)]
        )


@dataclass(frozen=True)
class IntRect:
    """An integer rectangle given by its top-left corner and size."""

    left: int = 0
    top: int = 0
    width: int = 0
    height: int = 0


@dataclass(eq=False)
class AssetTexture:
    """A loaded image split into a grid of frames."""

    image: Optional[Image.Image] = None
    alpha_grid: ImageAlphaGrid = field(default_factory=ImageAlphaGrid)
    frame_size: IVec = (0, 0)
    frame_count: IVec = (1, 1)
    divisions: IVec = (1, 1)

    @property
    def size(self) -> IVec:
        return self.image.size if self.image is not None else (0, 0)

    def __str__(self) -> str:
        return (
            f"{{ Texture Size: {_vec_str(self.size)}, "
            f"Frame Size: {_vec_str(self.frame_size)}, "
            f"Frame Count: {_vec_str(self.frame_count)} }}"
        )


@dataclass
class Sprite:
    """A rectangle cut from a texture."""

    texture: Optional[AssetTexture] = None
    rect: IntRect = field(default_factory=IntRect)


@dataclass(frozen=True)
class AssetKeySprites:
    """Identity of a sprite set: texture, frame range and tile id."""

    tex_name: str
    start: int
    end: int
    # Every tile of a multi-tile building gets its own id.
    tile_id: int = 0

    def __str__(self) -> str:
        return (
            f"{{ Texture name: {self.tex_name}, "
            f"Start: {self.start}, End: {self.end} }}"
        )


@dataclass
class AssetSprites:
    """The animation frames (and tiles) of one sprite set."""

    key: AssetKeySprites
    sprites: list[Sprite] = field(default_factory=list)
    alpha_grids: list[ImageAlphaGrid] = field(default_factory=list)
    section_count: IVec = (1, 1)
    frame_count: IVec = (1, 1)
    allow_overflow: bool = True
    sprite_size: IVec = (0, 0)

    @property
    def sprite_count(self) -> int:
        return len(self.sprites)

    def _check_index(self, i: int) -> int:
        if self.sprite_count == 0:
            raise IndexError(
                f"sprites of texture {self.key.tex_name!r} are empty"
            )
        if i >= self.sprite_count and not self.allow_overflow:
            raise IndexError(
                f"sprites of texture {self.key.tex_name!r} with count "
                f"{self.sprite_count} asked for index {i}"
            )
        return i % self.sprite_count

    def get(self, i: int) -> Sprite:
        """Return frame ``i``, wrapping around when overflow is allowed."""
        return self.sprites[self._check_index(i)]

    def alpha_grid(self, i: int) -> ImageAlphaGrid:
        """Return the transparency grid of frame ``i``."""
        return self.alpha_grids[self._check_index(i)]

    def __str__(self) -> str:
        return f"{{ Sprite Count: {self.sprite_count}, Key {self.key} }}"


class AssetManager:
    """Loads textures from a directory and cuts them into sprite sets."""

    NON: IVec = (-1, -1)

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.textures: list[AssetTexture] = []
        self.sprites: list[AssetSprites] = []
        self.textures_hash: dict[str, int] = {}
        self.sprites_hash: dict[AssetKeySprites, int] = {}
        self.null_texture = AssetTexture()

    def get_sprite(self, index: int) -> Optional[AssetSprites]:
        """Return the sprite set at ``index``, or None if there is none."""
        if 0 <= index < len(self.sprites):
            return self.sprites[index]
        return None

    def generate_null_texture(self) -> None:
        """Add a magenta and black checkered placeholder texture."""
        img = Image.new("RGBA", (NULL_TEXTURE_SIZE, NULL_TEXTURE_SIZE), _BLACK)
        cell = NULL_TEXTURE_SIZE // 32
        for i in range(32):
            x, y = i % 8, i // 8
            color = _BLACK if i % 2 else _MAGENTA
            img.paste(color, (x * cell, y * cell, (x + 1) * cell, (y + 1) * cell))
        self.textures.append(AssetTexture(image=img))

    def load_texture(
        self,
        name: str,
        frame_count: IVec = (1, 1),
        divisions: IVec = (1, 1),
        file_type: str = "png",
    ) -> int:
        """Load ``<path>/<name>.<file_type>`` and return its texture id."""
        file_path = self.path / f"{name}.{file_type}"
        try:
            with Image.open(file_path) as opened:
                img = opened.convert("RGBA")
        except OSError:
            logger.error("Can't load image %r", str(file_path))
            raise
        w, h = img.size
        texture = AssetTexture(
            image=img,
            alpha_grid=ImageAlphaGrid.from_image(img),
            frame_size=(w // frame_count[0], h // frame_count[1]),
            frame_count=tuple(frame_count),
            divisions=tuple(divisions),
        )
        self.textures.append(texture)
        tex_id = len(self.textures) - 1
        self.textures_hash[name.upper()] = tex_id
        return tex_id

    def split_sprites(
        self,
        index: int,
        frames_start: IVec,
        frames_end: IVec,
        pos: IVec,
        build_size: IVec,
    ) -> int:
        """Make a sprite set holding one tile of a multi-tile sprite set."""
        og = self.get_sprite(index)
        if og is None:
            logger.warning("Sprite with key %d was not found", index)
            raise KeyError(f"sprite {index} not found")

        key = AssetKeySprites(
            og.key.tex_name, og.key.start, og.key.end,
            pos[0] + pos[1] * build_size[0],
        )
        count = (frames_end[0] - frames_start[0] + 1) * (
            frames_end[1] - frames_start[1] + 1
        )
        tile_index = pos[0] + pos[1] * build_size[0]
        tile_total = build_size[0] * build_size[1]

        new = AssetSprites(key=key)
        for i in range(count):
            sprite_index = tile_index + tile_total * i
            if sprite_index >= og.sprite_count:
                raise IndexError(
                    f"tile frame {sprite_index} beyond sprite count {og.sprite_count}"
                )
            new.sprites.append(og.sprites[sprite_index])
            new.alpha_grids.append(og.alpha_grids[sprite_index])

        self.sprites.append(new)
        ret = len(self.sprites) - 1
        self.sprites_hash[key] = ret
        return ret

    def get_texture_from_name(self, name: str) -> AssetTexture:
        """Return the texture with ``name``, or the empty null texture."""
        tex_id = self.textures_hash.get(name.upper())
        if tex_id is None or tex_id >= len(self.textures):
            logger.warning(
                "Texture with name %r wasn't found, don't forget to add it.", name
            )
            return self.null_texture
        return self.textures[tex_id]

    def load_sprites(
        self,
        name: str,
        start: IVec,
        end: IVec,
        size: IVec = (1, 1),
    ) -> int:
        """Cut frames ``start`` to ``end`` of texture ``name`` into a sprite set.

        A set with the same texture and frames is made only once; later calls
        return its id.
        """
        if not name:
            raise ValueError("can't load texture with no name")
        if any(a == b for v in (start, end) for a, b in zip(v, self.NON)):
            raise ValueError("start or end can't be -1 in the x or y axis")

        tex_id = self.textures_hash.get(name.upper())
        if tex_id is None:
            logger.warning(
                "Texture with name %r wasn't found, don't forget to add it.",
                name.upper(),
            )
            raise KeyError(f"texture {name!r} not found")
        texture = self.textures[tex_id]

        fw, fh = texture.frame_size
        if start[0] >= fw or start[1] >= fh or end[0] >= fw or end[1] >= fh:
            raise ValueError("texture frame is out of bounds")

        cx = end[0] - start[0] + 1
        cy = end[1] - start[1] + 1
        if cx <= 0 or cy <= 0:
            raise ValueError(
                "animation end frame can't be before the start frame"
            )

        fcx, fcy = texture.frame_count
        key = AssetKeySprites(name, start[0] + start[1] * fcx, end[0] + start[1] * fcx)
        if key in self.sprites_hash:
            return self.sprites_hash[key]

        dx, dy = texture.divisions
        sec_x, sec_y = fcx // dx, fcy // dy
        tw, th = texture.size
        count = cx * cy * size[0] * size[1]

        out = AssetSprites(
            key=key,
            sprites=[Sprite() for _ in range(count)],
            alpha_grids=[ImageAlphaGrid() for _ in range(count)],
            section_count=(sec_x, sec_y),
            frame_count=texture.frame_count,
            sprite_size=(tw // dx, th // dy),
        )

        index = 0
        for j in range(cy):
            for i in range(cx):
                for jj in range(sec_y):
                    for ii in range(sec_x):
                        if index >= count:
                            continue
                        px = ((start[0] + i) * sec_x + ii) * fw
                        py = ((start[1] + j) * sec_y + jj) * fh
                        out.sprites[index] = Sprite(texture, IntRect(px, py, fw, fh))
                        out.alpha_grids[index] = texture.alpha_grid.subsection(
                            px, py, fw, fh
                        )
                        index += 1

        self.sprites.append(out)
        ret = len(self.sprites) - 1
        self.sprites_hash[key] = ret
        return ret