# models package for SQLModel models
from .user import User, Role  # noqa: F401  (import for metadata registration)
from .project import Project  # noqa: F401
from .collaborator import Collaborator, CollaboratorProject, Workload  # noqa: F401
