"""Read a single joint origin from a URDF file.

A fixed joint's ``<origin xyz rpy>`` is exactly the transform the sender
publishes, so it can be used to seed the initial state instead of numbers
typed on the command line.
"""

from dataclasses import dataclass
from typing import Tuple

from lxml import etree

from tf_sender.exceptions import ConfigurationError


@dataclass(frozen=True)
class JointOrigin:
    """Origin of a URDF joint.

    Attributes:
        parent_frame: Link named by the joint's ``<parent>``.
        child_frame: Link named by the joint's ``<child>``.
        xyz: Translation from parent to child.
        rpy: Fixed-axis roll, pitch, yaw in radians.
    """
    parent_frame: str
    child_frame: str
    xyz: Tuple[float, float, float]
    rpy: Tuple[float, float, float]


def _triple(text: str, attribute: str, joint_name: str) -> Tuple[float, float, float]:
    try:
        values = tuple(float(v) for v in text.split())
    except ValueError:
        raise ConfigurationError(f"Joint '{joint_name}' has a malformed {attribute}: {text!r}")
    if len(values) != 3:
        raise ConfigurationError(f"Joint '{joint_name}' {attribute} needs 3 values, got {text!r}")
    return values


def load_joint_origin(urdf_path: str, joint_name: str) -> JointOrigin:
    """Load the origin of ``joint_name`` from a URDF file.

    Args:
        urdf_path: Path to the URDF file to load.
        joint_name: Name attribute of the joint.

    Returns:
        JointOrigin: parent/child links and the joint's pose.
    """
    try:
        root = etree.parse(urdf_path).getroot()
    except (OSError, etree.XMLSyntaxError) as exc:
        raise ConfigurationError(f"Cannot read URDF '{urdf_path}': {exc}")

    joint = next(
        (j for j in root.findall('.//joint') if j.get('name') == joint_name), None
    )
    if joint is None:
        raise ConfigurationError(f"Joint '{joint_name}' not found in {urdf_path}")

    parent_elem = joint.find('parent')
    child_elem = joint.find('child')
    if parent_elem is None or child_elem is None:
        raise ConfigurationError(f"Joint '{joint_name}' needs both <parent> and <child>")

    # Missing <origin> means identity
    origin_elem = joint.find('origin')
    xyz_str = '0 0 0' if origin_elem is None else origin_elem.get('xyz', '0 0 0')
    rpy_str = '0 0 0' if origin_elem is None else origin_elem.get('rpy', '0 0 0')

    return JointOrigin(
        parent_frame=parent_elem.get('link'),
        child_frame=child_elem.get('link'),
        xyz=_triple(xyz_str, 'xyz', joint_name),
        rpy=_triple(rpy_str, 'rpy', joint_name),
    )
