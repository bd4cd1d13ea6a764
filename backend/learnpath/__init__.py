"""LearnPath: workspaces, projects, folders and learning pathways."""

__version__ = "0.1.0"
