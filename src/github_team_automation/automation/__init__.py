"""Team sync and pull-request labeling.

- Settings loaded from the environment and `.env`
- Structured logging
- A validated boundary for the team data file and labeler configuration
- Pure planners (membership diff, glob classification) feeding explicit actions
"""
