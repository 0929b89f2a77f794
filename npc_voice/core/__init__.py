"""NPC Voice Core"""
