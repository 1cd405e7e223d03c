"""
Conversion pipeline.

Drives parser -> transforms -> serializer for one source/target pair:

    pipeline = ConversionPipeline(get_format("yolo5obb"), get_format("cocojson"),
                                  "labels/", "out.json", image_directory="images/",
                                  class_map=load_class_map("classes.yaml"))
    summary = pipeline.convert()

Processing is strictly sequential. The first failure aborts the conversion
and propagates; output already written to disk is left in place.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .core.constants import ErrorMessages, ImagePathSupport, TransformKind
from .core.errors import ConfigurationError
from .core.logger import LoggerMixin
from .models import ClassMap, Format, compatibility
from .registry import create_parser, create_serializer
from .transforms import ClassMapping, Denormalize, LookupImage, Normalize, Transform


# Image lookup feeds the coordinate scaling, which may need the image file.
# Class mapping never depends on image state, so it runs last.
TRANSFORM_ORDER: tuple = (
    TransformKind.LOOKUP_IMAGE,
    TransformKind.NORMALIZE,
    TransformKind.DENORMALIZE,
    TransformKind.MAP_TO_ID,
    TransformKind.MAP_TO_NAME,
)

_SCALING = {TransformKind.NORMALIZE, TransformKind.DENORMALIZE}


@dataclass
class ConversionSummary:
    """Outcome of a successful conversion."""
    annotations: int = 0
    source_files: int = 0
    transforms: list[TransformKind] = field(default_factory=list)

    def __str__(self) -> str:
        applied = ", ".join(kind.value for kind in self.transforms) or "none"
        return (
            f"{self.annotations} annotations from {self.source_files} source files "
            f"(transforms: {applied})"
        )


class ConversionPipeline(LoggerMixin):
    """
    Convert one dataset between two registered formats.

    Args:
        source_format: Descriptor of the encoding being read
        target_format: Descriptor of the encoding being written
        source: Source file or directory
        target: Destination file or directory
        image_directory: Directory holding the images, for transforms that need them
        class_map: Name <-> id table, for class-mapping transforms
        missing_class_placeholder: Name/id used for classes missing from ``class_map``
        show_progress: Show a progress bar while streaming
    """

    def __init__(
        self,
        source_format: Format,
        target_format: Format,
        source,
        target,
        image_directory=None,
        class_map: Optional[ClassMap] = None,
        missing_class_placeholder: Optional[str] = None,
        show_progress: bool = False
    ):
        self.source_format = source_format
        self.target_format = target_format
        self.source = Path(source)
        self.target = Path(target)
        self.image_directory = Path(image_directory) if image_directory is not None else None
        self.class_map = class_map
        self.missing_class_placeholder = missing_class_placeholder
        self.show_progress = show_progress

    def plan_transforms(self) -> list[TransformKind]:
        """
        Ordered transform kinds this conversion needs.

        Starts from the compatibility of the two formats. When coordinates
        must be rescaled but the source stores no image reference, the image
        has to be found first, so LOOKUP_IMAGE is added.
        """
        required = compatibility(self.source_format, self.target_format)
        if required & _SCALING and self.source_format.image_path == ImagePathSupport.NO_PATH:
            required.add(TransformKind.LOOKUP_IMAGE)
        return [kind for kind in TRANSFORM_ORDER if kind in required]

    def configure(self) -> list[Transform]:
        """
        Build the ordered transform chain.

        Each transform checks the external configuration it needs when it is
        built, so nothing has been read or written when this fails.

        Returns:
            Fresh transform instances, with empty caches

        Raises:
            ConfigurationError: If an image directory or class map is missing
        """
        transforms: list[Transform] = []
        for kind in self.plan_transforms():
            if kind == TransformKind.LOOKUP_IMAGE:
                transforms.append(LookupImage(self.image_directory, read_dimensions=True))
            elif kind == TransformKind.NORMALIZE:
                transforms.append(Normalize(self.image_directory))
            elif kind == TransformKind.DENORMALIZE:
                transforms.append(Denormalize(self.image_directory))
            else:
                if self.class_map is None:
                    raise ConfigurationError(ErrorMessages.MISSING_CLASS_MAP.format(kind=kind.value))
                transforms.append(ClassMapping(self.class_map, kind, self.missing_class_placeholder))
        return transforms

    def convert(self) -> ConversionSummary:
        """
        Run the conversion.

        Returns:
            ConversionSummary with counts and the transforms applied

        Raises:
            ConfigurationError: Before any I/O, if the transforms can't be built
            BoxswapError: The first parse, transform, or serialize failure
        """
        transforms = self.configure()
        summary = ConversionSummary(transforms=[transform.kind for transform in transforms])

        self.logger.info(f"Converting {self.source_format} -> {self.target_format}")
        self.logger.info(f"Transforms: {', '.join(kind.value for kind in summary.transforms) or 'none'}")

        parser = create_parser(self.source_format.id)
        serializer = create_serializer(self.target_format.id)
        source_files = set()

        try:
            parser.init(self.source)
            serializer.init(self.target)

            with tqdm(desc="Converting", unit="ann", disable=not self.show_progress) as pbar:
                for annotation in parser:
                    for transform in transforms:
                        transform.apply(annotation, self.source_format, self.target_format)
                    serializer.push(annotation)

                    summary.annotations += 1
                    if annotation.source_file is not None:
                        source_files.add(annotation.source_file)
                    pbar.update(1)

            serializer.finish()
        finally:
            parser.close()
            serializer.close()

        summary.source_files = len(source_files)
        self.logger.info(f"Converted {summary}")
        return summary
