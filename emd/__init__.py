"""
emd - AWS resource explorer and Markdown documentation generator.

Browse EC2, network, security group, load balancer, ECR and Auto Scaling
resources from a terminal UI and assemble them into Markdown documents,
either one resource at a time or as an ordered blueprint.
"""

__version__ = "0.1.0"
__author__ = "emd"
