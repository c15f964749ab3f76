TRYON_BASE = (
    "You will be given two images. The first is a person, the second is an article "
    "of clothing. Your task is to perform a virtual try-on."
)

ISOLATE_GARMENT = (
    "First, you MUST isolate the clothing item from its background in the second "
    "image before placing it on the person."
)

TRYON_RULES = (
    "Realistically place the clothing onto the person from the first image. "
    "The clothing must conform to the person's body shape, posture, and any visible "
    "perspective. It is crucial that you preserve the person's original appearance "
    "(face, hair, skin tone) and the background from the first image unchanged. "
    "The final result should be a single, high-quality, photorealistic image."
)


def build_tryon_prompt(remove_background: bool) -> str:
    """Compose the try-on instruction, optionally asking for garment isolation first."""
    sections = [TRYON_BASE]
    if remove_background:
        sections.append(ISOLATE_GARMENT)
    sections.append(TRYON_RULES)
    return " ".join(sections)
