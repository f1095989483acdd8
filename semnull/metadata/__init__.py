from .attribute_meta import AttributeMeta
