"""
atlaspack Quick Start Example

Packs a folder of sprites into one atlas, then a demo set of random boxes.
"""

from atlaspack import AtlasBuilder, AtlasConfig
from atlaspack.demo import random_boxes
from atlaspack.sources import load_directory

# Pack a sprite folder with 2px edge expansion
builder = AtlasBuilder(AtlasConfig(atlas_size=1024, expand=2))
builder.register_sources(source for _, source in load_directory("sprites"))
result = builder.build()
result.save("output/sprites.png", binary=True)
print(f"✅ Packed {len(result.textures)} sprites into output/sprites.png")

# Random boxes, same as `atlaspack demo`
demo = AtlasBuilder(AtlasConfig(atlas_size=960, border=4))
demo.register_sources(random_boxes(seed=7))
demo.build().save("output/demo.png")
print("✅ Saved to output/demo.png")
