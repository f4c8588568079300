"""Shell snippet that puts `hgr` behind Ctrl-R in bash."""

BASH_INTEGRATION = r"""###### histgrep #####
# Helper for bash readline integration, used with `bind -x`.
function __histgrep_readline() {
    local tmpfile
    local cmd
    tmpfile=$(mktemp)
    HGR_INITIAL_SEARCH="${READLINE_LINE}" hgr --bash-readline-mode "${tmpfile}"
    # Note: $(<tmpfile) breaks bash here
    cmd=$(cat "${tmpfile}")
    rm -f "${tmpfile}"
    if [ -n "${cmd}" ]; then
        READLINE_LINE=${cmd}
        READLINE_POINT=${#cmd}
    fi
}

# Make Ctrl-R use `hgr` for searching history entries.
bind -m emacs-standard -x '"\C-r": __histgrep_readline'
bind -m vi-command -x '"\C-r": __histgrep_readline'
bind -m vi-insert -x '"\C-r": __histgrep_readline'
###### histgrep #####
"""
