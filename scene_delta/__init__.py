# Deterministic script-change analysis: scene graph + change report derivation
