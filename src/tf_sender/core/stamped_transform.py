"""StampedTransform PyTree: the immutable value handed to a broadcaster.

A snapshot of the canonical transform taken under the state lock. Being a
frozen flax dataclass it can be passed to other threads without copying.
"""

from jax import Array
from flax import struct

from tf_sender.transforms import so3


@struct.dataclass
class StampedTransform:
    """Immutable rigid-body transform from parent_frame to child_frame.

    Attributes:
        parent_frame: Name of the parent coordinate frame.
                      Marked as a static field for JIT compilation.
        child_frame: Name of the child coordinate frame.
                     Marked as a static field for JIT compilation.
        translation: Array of shape (3,) holding x, y, z.
        rotation: Array of shape (4,) holding a unit quaternion
                  in (x, y, z, w) order.
        stamp: Time in seconds at which the transform is valid.
    """
    parent_frame: str = struct.field(pytree_node=False)
    child_frame: str = struct.field(pytree_node=False)
    translation: Array
    rotation: Array
    stamp: float

    def as_matrix(self) -> Array:
        """4x4 homogeneous matrix of the transform."""
        return so3.homogeneous(self.translation, self.rotation)

    def to_dict(self) -> dict:
        """Plain-Python view used for serialisation."""
        return {
            "stamp": float(self.stamp),
            "frame_id": self.parent_frame,
            "child_frame_id": self.child_frame,
            "translation": [float(v) for v in self.translation],
            "rotation": [float(v) for v in self.rotation],
        }
